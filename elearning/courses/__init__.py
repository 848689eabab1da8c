"""
E-Learning Course Catalog Package - DSP (Digital Solutions Platform)

Dieses Paket enthält das Kurs-Modell, das der Checkout als Katalog nutzt:
Preis, Verfügbarkeit (veröffentlicht oder nicht) und den Zähler der
eingeschriebenen Teilnehmer.

Author: DSP Development Team
Version: 1.0.0
"""

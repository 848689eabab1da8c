"""
E-Learning Package - DSP (Digital Solutions Platform)

Dieses Paket enthält den Kurs-Shop des E-Learning-Systems: Katalog,
Warenkorb, Bestellungen und Einschreibungen.

Features:
- Warenkorb pro Benutzer
- Bestellungen mit unveränderlichen Preis-Snapshots
- Idempotentes Fulfillment (genau eine Einschreibung pro Benutzer und Kurs)
- Administrative Freischaltung von Kursen

Struktur:
- courses/: Kurskatalog (Preis, Verfügbarkeit, Teilnehmerzähler)
- cart/: Warenkorb
- orders/: Bestellungen, Order Factory und Fulfillment Engine
- enrollments/: Einschreibungen und Freischaltung
- management/: Django Management Commands

Author: DSP Development Team
Created: 10.07.2025
Version: 1.0.0
"""

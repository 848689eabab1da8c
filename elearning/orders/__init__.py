"""
E-Learning Orders Package - DSP (Digital Solutions Platform)

Bestellungen mit Preis-Snapshots, die Order Factory (Warenkorb → Bestellung)
und die Fulfillment Engine (bezahlte Bestellung → Einschreibungen, genau
einmal).

Author: DSP Development Team
Version: 1.0.0
"""

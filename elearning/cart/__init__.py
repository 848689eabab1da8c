"""
E-Learning Cart Package - DSP (Digital Solutions Platform)

Warenkorb pro Benutzer: Kurs → Menge. Der Checkout liest den Warenkorb und
leert ihn, sobald eine Bestellung angelegt wurde.

Author: DSP Development Team
Version: 1.0.0
"""

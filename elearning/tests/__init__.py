"""
E-Learning Tests - DSP (Digital Solutions Platform)

Test-Suite für den Kurs-Shop: Warenkorb, Bestellungen, Fulfillment,
Einschreibungen und die zugehörigen API-Endpunkte.

Author: DSP Development Team
Version: 1.0.0
"""

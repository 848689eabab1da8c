"""
Payments Package - DSP (Digital Solutions Platform)

Zahlungs-Gateways (Mock und Stripe), Webhook-Verarbeitung und die
Fehlerklassen des Checkouts.

Author: DSP Development Team
Version: 1.0.0
"""

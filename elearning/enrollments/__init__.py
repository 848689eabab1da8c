"""
E-Learning Enrollments Package - DSP (Digital Solutions Platform)

Einschreibungen sind der dauerhafte Nachweis, dass ein Benutzer Zugriff auf
einen Kurs hat. Pro (Benutzer, Kurs) existiert höchstens eine Einschreibung.

Author: DSP Development Team
Version: 1.0.0
"""

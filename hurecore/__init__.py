"""
hurecore - Clinic Workforce Core

Payroll statutory calculations, shift scheduling helpers, phone normalization
and report export for Kenyan clinic workforce management.
"""

__version__ = "0.1.0"

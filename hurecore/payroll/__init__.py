"""
Payroll Layer - Pure, Deterministic Calculations

Statutory deductions (PAYE, NSSF, SHIF, housing levy) and payroll entry
generation.
- Pure functions (input → output)
- No I/O operations
- Rules are passed in, never fetched
"""

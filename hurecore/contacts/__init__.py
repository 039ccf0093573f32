"""
Contacts - Phone Number Validation

Kenyan phone numbers normalized to +254XXXXXXXXX.
"""

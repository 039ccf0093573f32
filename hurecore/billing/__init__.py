"""
Billing - Plans and Trial Status

Plan pricing and trial-day countdowns. Payment providers are out of scope.
"""

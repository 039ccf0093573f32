"""
Scheduling Layer - Shift Date Arithmetic

Repeat-shift date generation and week ranges for schedule views.
"""

"""
Core Utilities - Shared Plumbing

Logging setup, environment configuration, error types and time handling
shared by every other layer.
"""

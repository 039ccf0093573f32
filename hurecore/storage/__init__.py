"""
Storage Layer - Versioned Statutory Rules

Repositories are passed in by the caller; nothing here holds a global client.
"""

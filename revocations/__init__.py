"""
Revocations module - authoritative record of revoked licenses.

This module handles:
- RevocationRecord entity and its stored form
- RevocationStore and its conditional-write retry protocol
- Blob storage adapters (Django ORM, in-memory)
"""

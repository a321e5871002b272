"""
Licenses module - License issuance.

This module handles:
- License entity and its canonical payload
- Signed token encoding and decoding
- Signing key loading
"""

"""
Licensing Service Django project.

Issues signed licenses and keeps the authoritative revocation record.
"""

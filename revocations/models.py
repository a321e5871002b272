"""
Model registry for the revocations app.
"""
from revocations.infrastructure.models import Blob  # noqa: F401

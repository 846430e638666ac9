"""Database models."""

from tokengate.models.developer import Developer
from tokengate.models.revoked_token import RevokedToken

__all__ = [
    "Developer",
    "RevokedToken",
]

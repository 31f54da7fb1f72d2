"""
Per-request authorization context. Resolved once and passed explicitly to
anything that needs to know who the caller is or whether they are an admin.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    is_admin: bool = False

from __future__ import annotations

"""Subpackage aggregating individual auth route modules."""

__all__ = [
    "account",
    "login",
    "oauth",
    "password_reset",
    "register",
]

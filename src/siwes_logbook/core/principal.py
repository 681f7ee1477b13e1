from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as resolved by the external identity provider."""

    user_id: int
    role: Role

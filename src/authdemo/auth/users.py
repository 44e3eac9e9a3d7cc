# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    CREATOR = "creator"
    INFLUENCER = "influencer"
    SPONSOR = "sponsor"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Return the Role for a wire value (trimmed, case-insensitive)."""
        if isinstance(value, Role):
            return value
        v = str(value or "").strip().lower()
        try:
            return cls(v)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown role '{value}' (expected one of: {allowed})") from None


DEFAULT_ROLE = Role.CREATOR


@dataclass(frozen=True)
class UserCandidate:
    name: str
    email: str
    raw_password: str
    role: Role = DEFAULT_ROLE
    profile_picture: Optional[str] = None


@dataclass(frozen=True)
class UserSnapshot:
    """Public identity of a user: everything except the password hash."""

    id: int
    name: str
    email: str
    role: Role
    profile_picture: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "profilePicture": self.profile_picture,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    password_hash: str
    role: Role
    profile_picture: Optional[str] = None

    def public(self) -> UserSnapshot:
        return UserSnapshot(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            profile_picture=self.profile_picture,
        )

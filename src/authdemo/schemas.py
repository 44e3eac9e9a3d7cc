# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request bodies for the JSON API."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from authdemo.auth.users import DEFAULT_ROLE, Role, UserCandidate

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _check_email(v: str) -> str:
    v = (v or "").strip()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email")
    return v


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role: Role = DEFAULT_ROLE
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def role_known(cls, v: Any) -> Role:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ROLE
        return Role.parse(v)

    @field_validator("profile_picture")
    @classmethod
    def blank_picture_is_none(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        return v or None

    def to_candidate(self) -> UserCandidate:
        return UserCandidate(
            name=self.name,
            email=self.email,
            raw_password=self.password,
            role=self.role,
            profile_picture=self.profile_picture,
        )


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _check_email(v)

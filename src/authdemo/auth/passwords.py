# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib
import hmac
import re

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_PH = PasswordHasher()

# Unsalted hex SHA-256, as written by older users files.
_LEGACY_SHA256 = re.compile(r"^[0-9a-f]{64}$")


def sha256_hex(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def hash_password(plain: str, *, scheme: str = "argon2") -> str:
    if not plain:
        raise ValueError("Empty password")
    if scheme == "sha256":
        return sha256_hex(plain)
    if scheme != "argon2":
        raise ValueError(f"Unknown password scheme '{scheme}'")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    if _LEGACY_SHA256.match(hash_value):
        return hmac.compare_digest(hash_value.encode("ascii"), sha256_hex(plain).encode("ascii"))
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication core.

This package provides:
- Password hashing/verification (argon2, legacy sha256)
- User records and the credential stores (memory / CSV file)
- Server-side sessions behind signed cookies (itsdangerous)
"""

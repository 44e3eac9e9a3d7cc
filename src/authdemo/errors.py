# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the store, the authenticator and the HTTP layer."""

from __future__ import annotations

from typing import Optional


class AuthDemoError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthDemoError):
    status_code = 400
    default_message = "Validation error"


class DuplicateEmail(AuthDemoError):
    status_code = 400
    default_message = "User with this email already exists"


class InvalidCredentials(AuthDemoError):
    # Same message for unknown email and wrong password.
    status_code = 401
    default_message = "Invalid email or password"


class Unauthenticated(AuthDemoError):
    status_code = 401
    default_message = "Not authenticated"


class StorageFailure(AuthDemoError):
    status_code = 500
    default_message = "Storage failure"


class MalformedRecord(StorageFailure):
    """A row in the users file could not be parsed."""

    def __init__(self, message: Optional[str] = None, *, line_no: Optional[int] = None) -> None:
        self.line_no = line_no
        if line_no is not None and message:
            message = f"line {line_no}: {message}"
        super().__init__(message)

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Flat-file persistence for user records.

One user per line, comma separated, mandatory header::

    id,name,email,password,profile_picture,role

Fields containing commas or quotes are CSV-quoted. An empty
``profile_picture`` means "no picture".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from authdemo.auth.users import Role, User
from authdemo.core.utils import missing_columns, norm_key, normalize_columns
from authdemo.errors import MalformedRecord, StorageFailure

logger = logging.getLogger(__name__)

USER_COLUMNS = ["id", "name", "email", "password", "profile_picture", "role"]
HEADER_LINE = ",".join(USER_COLUMNS)


def record_from_row(row: Dict[str, object], *, line_no: Optional[int] = None) -> User:
    """Parse one CSV row (already keyed by column) into a User."""
    raw_id = str(row.get("id", "") or "").strip()
    try:
        user_id = int(raw_id)
    except ValueError:
        raise MalformedRecord(f"invalid id '{raw_id}'", line_no=line_no) from None
    if user_id <= 0:
        raise MalformedRecord(f"invalid id '{raw_id}'", line_no=line_no)

    email = str(row.get("email", "") or "")
    if not email.strip():
        raise MalformedRecord("empty email", line_no=line_no)

    password_hash = str(row.get("password", "") or "").strip()
    if not password_hash:
        raise MalformedRecord("empty password hash", line_no=line_no)

    try:
        role = Role.parse(row.get("role", ""))
    except ValueError as e:
        raise MalformedRecord(str(e), line_no=line_no) from None

    picture = str(row.get("profile_picture", "") or "").strip()
    return User(
        id=user_id,
        name=str(row.get("name", "") or ""),
        email=email,
        password_hash=password_hash,
        role=role,
        profile_picture=picture or None,
    )


def record_to_row(user: User) -> Dict[str, object]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "password": user.password_hash,
        "profile_picture": user.profile_picture or "",
        "role": user.role.value,
    }


def _header_columns(first_line: str) -> Optional[List[str]]:
    """Return the header columns in file order, or None if the line is data."""
    cols = [norm_key(c) for c in first_line.split(",")]
    if sorted(cols) == sorted(USER_COLUMNS):
        return cols
    if cols and cols[0] == "id":
        raise MalformedRecord(f"header must name exactly the columns {HEADER_LINE}, got '{first_line}'", line_no=1)
    return None


def ensure_users_file(path: Path) -> List[str]:
    """Create the users file, or prepend the header to one that lacks it.

    Existing rows are preserved. Returns the header columns in file order.
    """
    try:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(HEADER_LINE + "\n", encoding="utf-8")
            logger.info("Created users file %s", path)
            return list(USER_COLUMNS)

        content = path.read_text(encoding="utf-8")
        first_line = content.lstrip("\ufeff").split("\n", 1)[0].strip()
        columns = _header_columns(first_line)
        if columns is not None:
            return columns

        body = content.lstrip("\ufeff")
        if body and not body.endswith("\n"):
            body += "\n"
        path.write_text(HEADER_LINE + "\n" + body, encoding="utf-8")
        logger.warning("Users file %s had no header; rewrote it with the header prepended", path)
        return list(USER_COLUMNS)
    except UnicodeDecodeError as e:
        raise MalformedRecord(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageFailure(f"Could not prepare users file {path}: {e}") from e


def read_users(path: Path) -> List[User]:
    """Parse the whole users file. No caching: every call reads the file."""
    ensure_users_file(path)
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="error",
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise MalformedRecord(f"Could not parse {path}: {e}") from e
    except OSError as e:
        raise StorageFailure(f"Could not read users file {path}: {e}") from e

    df = normalize_columns(df).fillna("")
    missing = missing_columns(df, USER_COLUMNS)
    if missing:
        raise MalformedRecord(f"{path} is missing columns: {', '.join(missing)}")

    # Line 1 is the header.
    return [record_from_row(r, line_no=i) for i, r in enumerate(df.to_dict(orient="records"), start=2)]


def append_user(path: Path, user: User) -> None:
    """Append exactly one line for ``user``, in the file's column order."""
    columns = ensure_users_file(path)
    try:
        with path.open("rb") as fh:
            fh.seek(0, 2)
            needs_newline = False
            if fh.tell() > 0:
                fh.seek(-1, 2)
                needs_newline = fh.read(1) != b"\n"
        if needs_newline:
            with path.open("a", encoding="utf-8") as fh:
                fh.write("\n")
        pd.DataFrame([record_to_row(user)], columns=columns).to_csv(
            path,
            mode="a",
            header=False,
            index=False,
            encoding="utf-8",
            lineterminator="\n",
        )
    except OSError as e:
        raise StorageFailure(f"Could not append to users file {path}: {e}") from e

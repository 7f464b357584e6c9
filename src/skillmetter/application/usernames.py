"""Username sanitising and format validation.

Usage example:
    from skillmetter.application.usernames import sanitize_input, validate_username

    username = sanitize_input("  <alice>  ")
    error = validate_username(username)
    assert error is None
"""

from __future__ import annotations

import re

MIN_USERNAME_LENGTH = 2
MAX_USERNAME_LENGTH = 30
RESERVED_USERNAMES = frozenset({"admin", "root", "system", "tryhackme", "thm"})

_USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_.\-]+")
_UNSAFE_CHARACTERS = re.compile(r"[<>'\"]")


def sanitize_input(value: str) -> str:
    """Trim surrounding whitespace and drop characters that could break out of markup."""
    return _UNSAFE_CHARACTERS.sub("", value.strip())


def validate_username(username: str) -> str | None:
    """Return a reason the username is unusable, or None when it is acceptable."""
    if len(username) < MIN_USERNAME_LENGTH:
        return f"Username must be at least {MIN_USERNAME_LENGTH} characters"
    if len(username) > MAX_USERNAME_LENGTH:
        return f"Username must be {MAX_USERNAME_LENGTH} characters or less"
    if not _USERNAME_PATTERN.fullmatch(username):
        return "Username can only contain letters, numbers, underscores, dots, and hyphens"
    if username.lower() in RESERVED_USERNAMES:
        return "Profile not found or is private"
    return None

"""Email normalisation shared by the HTTP layer and the CLI.

Accounts are looked up by exact email match, so every address entering the
system goes through the same ``EmailStr`` validation first (which lowercases
the domain part).
"""

from __future__ import annotations

from pydantic import EmailStr, TypeAdapter

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value: str) -> str:
    """Return the canonical form of *value*.

    Raises:
        ValueError: If *value* is not a valid email address
            (``pydantic.ValidationError`` is a ``ValueError``).
    """
    return _email_adapter.validate_python(value)

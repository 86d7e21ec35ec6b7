"""bcrypt password hashing.

The storage layer never hashes anything itself; registration hashes here
first and stores the result together with ``PASSWORD_VERSION``.
"""

from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Return a bcrypt hash of *password* (10 rounds) as text."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode(
        "ascii"
    )


def verify_password(password: str, hashed: str) -> bool:
    """Check *password* against *hashed*.

    Returns ``False`` instead of raising when *hashed* is not a bcrypt hash
    (demo accounts store a random blocker token rather than a hash).
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False

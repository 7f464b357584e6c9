"""Short random identifiers for badges, certifications and shared comparisons."""

from __future__ import annotations

import random
import secrets
import string

ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
SHARE_ID_LENGTH = 10


def generate_id(length: int = 8, rng: random.Random | None = None) -> str:
    """Return ``length`` alphanumeric characters.

    Seeded generators pass their own ``rng`` so the ids they produce are reproducible.
    """
    if rng is not None:
        return "".join(rng.choice(ID_ALPHABET) for _ in range(length))
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def generate_share_id() -> str:
    return generate_id(SHARE_ID_LENGTH)

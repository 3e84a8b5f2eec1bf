"""Identifier generation.

Occasions, events, tags and imported guests get opaque random ids. Guests added by
hand get a readable id built from their name. A guest id doubles as the RSVP
capability token, so every id carries enough randomness to be unguessable.
"""

import re
import secrets
import string

ALPHANUMERIC = string.ascii_letters + string.digits
DOCUMENT_ID_LENGTH = 20
GUEST_ID_SUFFIX_LENGTH = 12

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def random_token(length: int = DOCUMENT_ID_LENGTH) -> str:
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def generate_id() -> str:
    return random_token(DOCUMENT_ID_LENGTH)


def clean_name_part(value: str | None) -> str:
    return _NON_ALPHANUMERIC.sub("", value or "")


def generate_guest_id(first_name: str | None, last_name: str | None) -> str:
    """Build `First-Last-<12 random alphanumerics>`.

    Falls back to a plain token when neither name has anything usable left.
    """
    parts = [part for part in (clean_name_part(first_name), clean_name_part(last_name)) if part]
    if not parts:
        return random_token()
    return "-".join([*parts, random_token(GUEST_ID_SUFFIX_LENGTH)])

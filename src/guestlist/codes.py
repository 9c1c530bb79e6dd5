"""Confirmation identifiers.

Two identifiers are stored on every guest at creation time and never change:

* the confirmation token, an opaque url-safe string (a uuid4) embedded in links;
* the confirmation code, ``CONF-`` followed by 6 characters from ``A-Z0-9``,
  short enough to be read aloud or typed by hand.

Codes are compared case-insensitively, so their effective alphabet is 36
symbols: 36**6 (about 2.18e9) distinct codes. By the birthday bound the chance of
any collision among n stored codes is roughly n**2 / (2 * 36**6), about 0.2% at
3,000 guests. Generation therefore retries against the codes already stored
across all events and gives up with ``CodeGenerationError`` after
``settings.CODE_GENERATION_ATTEMPTS`` tries.
"""

import secrets
import string
from collections.abc import Iterable
from uuid import uuid4

from src.config.settings import settings
from src.guestlist.dtos import Event
from src.guestlist.errors import CodeGenerationError

CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(code: str) -> str:
    return code.strip().upper()


def generate_confirmation_token() -> str:
    return str(uuid4())


def generate_confirmation_code() -> str:
    suffix = "".join(
        secrets.choice(CODE_ALPHABET) for _ in range(settings.CONFIRMATION_CODE_LENGTH)
    )
    return f"{settings.CONFIRMATION_CODE_PREFIX}{suffix}"


def _existing_identifiers(events: Iterable[Event]) -> tuple[set[str], set[str]]:
    tokens: set[str] = set()
    codes: set[str] = set()
    for event in events:
        for guest in event.guests:
            tokens.add(guest.confirmation_token)
            if guest.confirmation_code:
                codes.add(normalize_code(guest.confirmation_code))
    return tokens, codes


def generate_unique_identifiers(
    events: Iterable[Event], reserved_codes: Iterable[str] = ()
) -> tuple[str, str]:
    """Return a ``(token, code)`` pair unused by any guest of ``events``."""
    tokens, codes = _existing_identifiers(events)
    codes.update(normalize_code(code) for code in reserved_codes)

    for _ in range(settings.CODE_GENERATION_ATTEMPTS):
        token = generate_confirmation_token()
        if token not in tokens:
            break
    else:
        raise CodeGenerationError("Could not generate a unique confirmation token")

    for _ in range(settings.CODE_GENERATION_ATTEMPTS):
        code = generate_confirmation_code()
        if normalize_code(code) not in codes:
            return token, code
    raise CodeGenerationError("Could not generate a unique confirmation code")


def confirmation_link(token: str) -> str:
    return f"{settings.frontend_url}/confirm/{token}"


def public_registration_link(event_id: str) -> str:
    return f"{settings.frontend_url}/rsvp/{event_id}"


def promoter_invite_link(event_id: str) -> str:
    return f"{settings.frontend_url}/promoter/invite/{event_id}"

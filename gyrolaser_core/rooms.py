"""Room code generation and validation.

Room codes are 6 characters drawn from uppercase letters and digits, leaving out
the visually ambiguous 0/O and 1/I so they can be read off a projector screen.
Collisions between live rooms are not checked (32^6 possible codes).
"""
import re
import secrets
from typing import Any, Optional

ROOM_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_ID_LENGTH = 6

_ROOM_ID_PATTERN = re.compile(r"[A-Za-z0-9]{%d}" % ROOM_ID_LENGTH)


def generate_room_id() -> str:
    """Return a random room code, e.g. ``"A3X9K2"``."""
    return "".join(secrets.choice(ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))


def normalize_room_id(room_id: Any) -> Optional[str]:
    """Trim and uppercase a candidate room code.

    Returns the normalized code, or ``None`` if the input is not a string or is
    not exactly 6 characters of ``[A-Za-z0-9]`` after trimming.
    """
    if not isinstance(room_id, str):
        return None
    candidate = room_id.strip()
    # match before upper(): "\u00df".upper() == "SS"
    if not _ROOM_ID_PATTERN.fullmatch(candidate):
        return None
    return candidate.upper()


def is_valid_room_id(room_id: Any) -> bool:
    return normalize_room_id(room_id) is not None

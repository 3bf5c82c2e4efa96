"""
Identifier generation.
"""

import secrets
import string
from datetime import date
from uuid import uuid4

PUBLIC_ID_CHARSET = string.ascii_uppercase + string.digits
PUBLIC_ID_SUFFIX_LENGTH = 4


def new_id() -> str:
    """Primary key for every table (UUID4 string)"""
    return str(uuid4())


def random_string(length: int, charset: str = PUBLIC_ID_CHARSET) -> str:
    """Random string drawn from a cryptographic source"""
    return "".join(secrets.choice(charset) for _ in range(length))


def generate_public_id(prefix: str, on: date) -> str:
    """
    Short human-shareable request code, e.g. ``REQ-20240601-7QZ3``.

    Codes are not keys; a collision only means two requests share a label.
    """
    return f"{prefix}-{on.strftime('%Y%m%d')}-{random_string(PUBLIC_ID_SUFFIX_LENGTH)}"

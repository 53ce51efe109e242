# storefront/core/ids.py
import os
import re
import time

from storefront.core.errors import InvalidIdFormatError

OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """
    Generate a 24-char hex identifier.

    Layout follows the document-store ObjectId convention:
    4 bytes of unix time followed by 8 random bytes, so ids sort roughly
    by creation time.
    """
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{os.urandom(8).hex()}"


def is_valid_object_id(value: object) -> bool:
    return isinstance(value, str) and OBJECT_ID_RE.match(value) is not None


def ensure_object_id(value: object) -> str:
    """
    Validate and normalize an id before it reaches persistence.

    Raises:
        InvalidIdFormatError: if value is not a 24-char hex string.
    """
    if not is_valid_object_id(value):
        raise InvalidIdFormatError()
    return value.lower()

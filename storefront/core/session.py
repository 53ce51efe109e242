# storefront/core/session.py
import re

from fastapi import Request

from storefront.core.config import get_settings
from storefront.core.errors import InputValidationError

settings = get_settings()

SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_.:\-]{1,128}$")


def get_cart_session_id(request: Request) -> str:
    """
    Resolve which cart the caller is talking about.

    Flow:
      1. Read the configured header (X-Cart-Session by default).
      2. If missing => fall back to DEFAULT_CART_SESSION_ID (one shared cart).
      3. Validate the format before it reaches persistence.

    Raises:
        InputValidationError(400): if the header is present but malformed.
    """
    raw = request.headers.get(settings.CART_SESSION_HEADER)
    if raw is None:
        return settings.DEFAULT_CART_SESSION_ID

    session_id = raw.strip()
    if not SESSION_ID_RE.match(session_id):
        raise InputValidationError(
            error=f"{settings.CART_SESSION_HEADER} must be 1-128 characters of [A-Za-z0-9_.:-]"
        )
    return session_id

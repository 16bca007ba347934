"""
WhatsApp Webhook Authorization

SECURITY BOUNDARY - Verify the Green-API webhook token.
No bot imports. No retries.

Green-API sends the token configured as ``webhookUrlToken`` in the
Authorization header of every webhook call.
"""

import hmac
import os
from typing import Optional

from fastapi import HTTPException, Request, status


def verify_webhook_token(
    request: Request,
    expected_token: Optional[str] = None,
) -> None:
    """
    Verify the Authorization header of a Green-API webhook call.

    The check is skipped when no token is configured.

    Raises:
        HTTPException(401): Missing Authorization header
        HTTPException(403): Wrong token

    Args:
        request: FastAPI Request object
        expected_token: Token to compare against (defaults to GREEN_API_WEBHOOK_TOKEN)
    """

    if expected_token is None:
        expected_token = os.getenv("GREEN_API_WEBHOOK_TOKEN", "")
    if not expected_token:
        return

    header = request.headers.get("Authorization")
    if not header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header"
        )

    provided = header[len("Bearer "):] if header.startswith("Bearer ") else header

    # Compare (constant-time to prevent timing attacks)
    if not hmac.compare_digest(provided.encode("utf-8"), expected_token.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid webhook token"
        )

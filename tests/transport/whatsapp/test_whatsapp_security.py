"""
WhatsApp Webhook Authorization Tests

Verify the Green-API webhook token check.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from transport.whatsapp.security import verify_webhook_token


def _request(headers):
    request = MagicMock()
    request.headers = headers
    return request


class TestWebhookToken:
    """Test Authorization header verification."""

    def test_valid_bearer_token(self):
        """Valid token passes."""
        verify_webhook_token(_request({"Authorization": "Bearer s3cret"}), expected_token="s3cret")

    def test_raw_token_accepted(self):
        verify_webhook_token(_request({"Authorization": "s3cret"}), expected_token="s3cret")

    def test_invalid_token_returns_403(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_webhook_token(_request({"Authorization": "Bearer wrong"}), expected_token="s3cret")

        assert exc_info.value.status_code == 403

    def test_missing_header_returns_401(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_webhook_token(_request({}), expected_token="s3cret")

        assert exc_info.value.status_code == 401

    def test_no_configured_token_skips_check(self):
        with patch.dict("os.environ", {"GREEN_API_WEBHOOK_TOKEN": ""}):
            verify_webhook_token(_request({}))

    def test_token_read_from_environment(self):
        with patch.dict("os.environ", {"GREEN_API_WEBHOOK_TOKEN": "env_token"}):
            verify_webhook_token(_request({"Authorization": "Bearer env_token"}))

            with pytest.raises(HTTPException):
                verify_webhook_token(_request({"Authorization": "Bearer other"}))

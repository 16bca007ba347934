"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chatbot import BotConfig, GptBot  # noqa: E402
from inference import StubModelBackend  # noqa: E402
from transport.whatsapp.schemas import (  # noqa: E402
    IncomingMessage,
    LocationPayload,
    MediaPayload,
    SendMessageResponse,
)


class RecordingGreenApiClient:
    """Stands in for GreenApiClient; records every outbound text."""

    def __init__(self, notifications=None, files=None):
        self.sent = []
        self.deleted = []
        self.notifications = list(notifications or [])
        self.files = dict(files or {})
        self.cleared = 0
        self.closed = False

    async def send_message(self, chat_id, text):
        self.sent.append((chat_id, text))
        return SendMessageResponse(idMessage=f"out_{len(self.sent)}")

    async def receive_notification(self, receive_timeout_s=5):
        if self.notifications:
            return self.notifications.pop(0)
        return None

    async def delete_notification(self, receipt_id):
        self.deleted.append(receipt_id)
        return True

    async def clear_queue(self):
        self.cleared += len(self.notifications)
        self.notifications = []
        return self.cleared

    async def download(self, url):
        return self.files[url]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def bot_config():
    return BotConfig(
        instance_id="1101000001",
        api_token="test_token",
        llm_backend="stub",
        model="gpt-4o",
        system_message="You are a test assistant.",
        max_history_length=15,
        temperature=0.5,
    )


@pytest.fixture
def green_api():
    return RecordingGreenApiClient()


@pytest.fixture
def stub_model():
    return StubModelBackend(reply="Hello from the model")


@pytest.fixture
def bot(bot_config, green_api, stub_model):
    return GptBot(bot_config, model=stub_model, client=green_api)


@pytest.fixture
def make_message():
    """Build IncomingMessage objects with sensible defaults."""

    def _make(text=None, type="text", chat_id="79001234567@c.us", **fields):
        return IncomingMessage(
            message_id=fields.pop("message_id", "msg_1"),
            chat_id=chat_id,
            sender_id=fields.pop("sender_id", chat_id),
            type=type,
            text=text,
            **fields,
        )

    return _make


@pytest.fixture
def location_payload():
    return LocationPayload(latitude=55.75, longitude=37.61, name="Red Square")


@pytest.fixture
def document_media():
    return MediaPayload(
        url="https://media.green-api.com/file.pdf",
        mime_type="application/pdf",
        file_name="report.pdf",
    )

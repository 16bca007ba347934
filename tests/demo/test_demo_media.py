"""
Demo Payload Handler Tests

Location and document handlers, plus the enhanced image handler.
"""

import random

import pytest

from chatbot.media import image_handler
from chatbot.session import Session
from demo.media import (
    IMAGE_REDIRECT,
    NEARBY_PLACES,
    document_handler,
    enhance_image_handler,
    location_handler,
    sample_nearby_places,
)
from transport.whatsapp.schemas import MediaPayload


class TestNearbyPlaces:

    def test_three_distinct_places(self):
        """Sampling without replacement never repeats a place."""
        rng = random.Random(0)
        for _ in range(100):
            places = sample_nearby_places(rng=rng)
            assert len(places) == 3
            assert len(set(places)) == 3
            assert set(places) <= set(NEARBY_PLACES)

    def test_source_list_is_not_mutated(self):
        before = list(NEARBY_PLACES)
        sample_nearby_places()
        assert NEARBY_PLACES == before

    def test_count_capped_by_available_places(self):
        places = sample_nearby_places(["A", "B"], count=3)
        assert sorted(places) == ["A", "B"]

    def test_index_selection_with_removal(self):
        class FixedRandom:
            def random(self):
                return 0.0

        # Always index 0 → the first three in order
        assert sample_nearby_places(rng=FixedRandom()) == NEARBY_PLACES[:3]


class TestLocationHandler:

    @pytest.mark.asyncio
    async def test_reply_lists_three_unique_places(self, bot, green_api, make_message, location_payload):
        message = make_message(type="location", location=location_payload)
        session = Session(chat_id=message.chat_id, messages=[])

        for _ in range(3):
            await location_handler(bot, message, session)

        assert len(green_api.sent) == 3
        for _, text in green_api.sent:
            assert text.startswith("Thank you for sharing your location at Red Square (55.75, 37.61).")
            bullets = [line[2:] for line in text.splitlines() if line.startswith("• ")]
            assert len(bullets) == 3
            assert len(set(bullets)) == 3

    @pytest.mark.asyncio
    async def test_unnamed_location(self, bot, green_api, make_message):
        from transport.whatsapp.schemas import LocationPayload

        message = make_message(type="location", location=LocationPayload(latitude=1.5, longitude=2.5))
        await location_handler(bot, message, Session(chat_id=message.chat_id))

        assert "at this location (1.5, 2.5)" in green_api.sent[-1][1]

    @pytest.mark.asyncio
    async def test_missing_location_is_silent(self, bot, green_api, make_message):
        message = make_message(type="location")
        await location_handler(bot, message, Session(chat_id=message.chat_id))

        assert green_api.sent == []


class TestDocumentHandler:

    @pytest.mark.asyncio
    async def test_reports_file_name(self, bot, green_api, make_message, document_media):
        message = make_message(type="document", media=document_media)

        handled = await document_handler(bot, message, Session(chat_id=message.chat_id))

        assert handled is True
        assert green_api.sent[-1][1].startswith('I received your document: "report.pdf"')

    @pytest.mark.asyncio
    async def test_placeholder_for_unnamed_file(self, bot, green_api, make_message):
        message = make_message(type="document", media=MediaPayload(url="https://x/y"))

        await document_handler(bot, message, Session(chat_id=message.chat_id))

        assert '"unknown file"' in green_api.sent[-1][1]

    @pytest.mark.asyncio
    async def test_missing_media_is_silent(self, bot, green_api, make_message):
        message = make_message(type="document")

        result = await document_handler(bot, message, Session(chat_id=message.chat_id))

        assert result is None
        assert green_api.sent == []


class TestEnhancedImageHandler:

    @pytest.mark.asyncio
    async def test_textual_result_gets_redirect_clause(self, bot, make_message):
        async def base(bot, message):
            return "[The user sent an image of a cat]"

        handler = enhance_image_handler(base)
        result = await handler(bot, make_message(type="image"))

        assert IMAGE_REDIRECT in result
        assert "Tell them that you are not the model they should be using" in result
        assert result.endswith(" of a cat]")

    @pytest.mark.asyncio
    async def test_text_without_marker_unchanged(self, bot, make_message):
        async def base(bot, message):
            return "a picture"

        result = await enhance_image_handler(base)(bot, make_message(type="image"))

        assert result == "a picture"

    @pytest.mark.asyncio
    async def test_structured_result_passes_through(self, bot, make_message):
        parts = [{"type": "image_url", "image_url": {"url": "https://x/cat.jpg"}}]

        async def base(bot, message):
            return parts

        result = await enhance_image_handler(base)(bot, make_message(type="image"))

        assert result is parts

    @pytest.mark.asyncio
    async def test_wraps_default_handler_for_text_only_models(self, green_api, make_message):
        from chatbot import BotConfig, GptBot
        from inference import StubModelBackend

        config = BotConfig(instance_id="1", api_token="t", llm_backend="stub", model="gpt-3.5-turbo")
        text_only_bot = GptBot(config, model=StubModelBackend(), client=green_api)
        message = make_message(type="image", media=MediaPayload(url="https://x/cat.jpg", caption="my cat"))

        result = await enhance_image_handler(image_handler)(text_only_bot, message)

        assert isinstance(result, str)
        assert result.startswith(IMAGE_REDIRECT)
        assert 'with caption: "my cat"' in result

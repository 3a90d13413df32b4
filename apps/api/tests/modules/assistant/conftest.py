"""
Fixtures for assistant tests.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mwalimu.modules.assistant.service import AssistantService


@pytest.fixture
def genai_mock():
    """The Gemini client module, replaced for the duration of a test."""
    with patch("mwalimu.modules.assistant.service.genai") as mocked:
        yield mocked


@pytest.fixture
def model(genai_mock):
    """The model every GenerativeModel(...) call returns."""
    model = MagicMock()
    model.generate_content_async = AsyncMock()
    chat = model.start_chat.return_value
    chat.send_message_async = AsyncMock()
    genai_mock.GenerativeModel.return_value = model
    return model


@pytest.fixture
def assistant(genai_mock, model):
    """A configured assistant talking to the mocked model."""
    return AssistantService(model_name="gemini-test", api_key="test-key")


@pytest.fixture
def unconfigured_assistant():
    return AssistantService(model_name="gemini-test", api_key=None)

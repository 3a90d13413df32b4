"""
Assistant Service

Wraps the hosted Gemini model used for role-specific reports and chats.

- County officers and school heads ask one-shot questions about dashboard
  data and get a short report back.
- Students chat with a Socratic tutor, teachers with a teaching assistant.
  Chats are rebuilt from the client-supplied history on every turn.

Reports degrade to a fixed apology (and equity analysis to a sample data
set) when the provider fails, so the dashboard keeps rendering. Chat failures
are raised so the client can show the error next to the unsent message.
"""

import logging

import google.generativeai as genai
from pydantic import TypeAdapter

from mwalimu.core.config import Settings
from mwalimu.modules.assistant import prompts
from mwalimu.modules.assistant.schemas import Message, WardEquity

logger = logging.getLogger(__name__)

FALLBACK_EQUITY_DATA = [
    WardEquity(ward="Ward A", resource=85, score=78),
    WardEquity(ward="Ward B", resource=92, score=85),
    WardEquity(ward="Ward C", resource=45, score=55),
    WardEquity(ward="Ward D", resource=60, score=62),
]

_ward_list = TypeAdapter(list[WardEquity])


class AssistantServiceError(Exception):
    """Base exception for assistant errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 500):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class AssistantUnavailableError(AssistantServiceError):
    """Raised when no model API key is configured."""

    def __init__(self):
        super().__init__(
            message="AI features are not configured on this server.",
            error_code="ASSISTANT_UNAVAILABLE",
            status_code=503,
        )


class AssistantRequestError(AssistantServiceError):
    """Raised when the model provider fails to answer a chat message."""

    def __init__(self):
        super().__init__(
            message="The assistant could not respond. Please try again.",
            error_code="ASSISTANT_REQUEST_FAILED",
            status_code=502,
        )


def to_model_history(history: list[Message]) -> list[dict]:
    """Convert chat messages to the provider's content format."""
    return [
        {"role": "user" if message.sender == "user" else "model", "parts": [message.text]}
        for message in history
    ]


class AssistantService:
    """Role-specific assistant backed by a Gemini model."""

    def __init__(self, model_name: str, api_key: str | None):
        self.model_name = model_name
        self._configured = bool(api_key)
        if self._configured:
            genai.configure(api_key=api_key)
        else:
            logger.warning("GEMINI_API_KEY not set - assistant endpoints are disabled")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssistantService":
        api_key = settings.gemini_api_key.get_secret_value() if settings.gemini_api_key else None
        return cls(model_name=settings.gemini_model, api_key=api_key)

    @property
    def is_configured(self) -> bool:
        return self._configured

    def _model(
        self,
        system_instruction: str | None = None,
        generation_config: genai.GenerationConfig | None = None,
    ) -> genai.GenerativeModel:
        if not self._configured:
            raise AssistantUnavailableError()
        return genai.GenerativeModel(
            self.model_name,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

    async def _report(self, prompt: str, kind: str) -> str:
        model = self._model()
        try:
            response = await model.generate_content_async(prompt)
            return response.text
        except Exception as e:
            logger.error(f"Error generating {kind} report: {e}")
            return prompts.REPORT_FAILURE_MESSAGE

    async def county_officer_report(self, query: str, context: str) -> str:
        """Answer a county officer's question about county-wide data."""
        return await self._report(prompts.county_officer_report_prompt(query, context), "county officer")

    async def school_head_report(self, query: str, context: str) -> str:
        """Answer a school head's question about their school's data."""
        return await self._report(prompts.school_head_report_prompt(query, context), "school head")

    async def equity_analysis(self, context: str) -> list[WardEquity]:
        """
        Generate a per-ward resource vs. score analysis for a county.

        Returns:
            Four wards, or the sample data set if generation or parsing fails
        """
        model = self._model(
            generation_config=genai.GenerationConfig(response_mime_type="application/json"),
        )
        try:
            response = await model.generate_content_async(prompts.equity_analysis_prompt(context))
            return _ward_list.validate_json(response.text.strip())
        except Exception as e:
            logger.error(f"Error generating equity analysis, using sample data: {e}")
            return list(FALLBACK_EQUITY_DATA)

    async def _chat(self, system_instruction: str, history: list[Message], message: str) -> Message:
        model = self._model(system_instruction=system_instruction)
        chat = model.start_chat(history=to_model_history(history))
        try:
            response = await chat.send_message_async(message)
            text = response.text
        except Exception as e:
            logger.error(f"Assistant chat failed: {e}")
            raise AssistantRequestError() from e
        return Message(sender="ai", text=text)

    async def tutor_reply(
        self,
        history: list[Message],
        message: str,
        resource_context: str = "",
    ) -> Message:
        """Reply to a student as the Socratic tutor."""
        return await self._chat(prompts.tutor_instruction(resource_context), history, message)

    async def teacher_assistant_reply(self, history: list[Message], message: str) -> Message:
        """Reply to a teacher as the teaching assistant."""
        return await self._chat(prompts.TEACHER_ASSISTANT_INSTRUCTION, history, message)

"""
LLM-backed formatting of free slots.
"""

import logging
from typing import Optional

import openai
from openai import OpenAI

from ..domain.exceptions import AssistantError

logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTIONS = """You are an expert assistant for a calendar free-slot generator tool.
Your job is to read raw calendar gaps and filter/format them according to the user's natural language instructions.
Default instructions from app: "Format these free slots into a bulleted list exactly like this: 'Monday (2 Mar): 11:30-1:30 p.m., 3-5 p.m.' Each day should be its own bullet. Use 12-hour AM/PM format. Only output the list, no conversational filler."

Important:
- Read the "User Request" carefully. If the user says "next 5 working days", only output 5 working days from the provided gaps.
- Do NOT hallucinate slots. Only use the provided "Available Gaps".
- If no gaps fit the user's criteria, respond simply stating that."""

NO_SLOTS_MESSAGE = "No free slots found based on criteria."


def build_user_message(prompt: str, raw_gaps: str) -> str:
    """Combine the user's request with the raw gap list."""
    return f"User Request: {prompt}\n\nAvailable Gaps:\n{raw_gaps}"


class OpenAISlotAssistant:
    """
    Formats raw gaps through an OpenAI chat completion.

    The output is free text; callers must not rely on its exact shape.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        timeout: float = 30.0,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the assistant.

        Args:
            api_key: OpenAI API key; the client reads OPENAI_API_KEY when omitted
            model: Chat model name
            temperature: Sampling temperature
            timeout: Seconds to wait for the completion
            client: Pre-built client, mainly for tests
        """
        self.model = model
        self.temperature = temperature
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> OpenAI:
        # Built lazily so a missing key only fails when the assistant is used
        if self._client is None:
            try:
                self._client = OpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
            except openai.OpenAIError as exc:
                raise AssistantError(f"Could not create OpenAI client: {exc}") from exc
        return self._client

    def format_slots(self, prompt: str, raw_gaps: str) -> str:
        """
        Ask the model to filter and format ``raw_gaps`` per ``prompt``.

        Raises:
            AssistantError: If the completion request fails
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTIONS},
                    {"role": "user", "content": build_user_message(prompt, raw_gaps)},
                ],
                temperature=self.temperature,
            )
        except openai.OpenAIError as exc:
            logger.error("Slot assistant request failed: %s", exc)
            raise AssistantError(f"Slot assistant request failed: {exc}") from exc

        content = None
        if response.choices:
            content = response.choices[0].message.content

        return (content or "").strip() or NO_SLOTS_MESSAGE

"""
Assistant client: forwards questions to a remote LLM via LiteLLM.

The engine only supplies structured context (pet profile, recent events,
optional images) and gets free text back.  Any failure surfaces as an
``AssistantError`` whose ``user_message`` is a "try again" prompt; local
analytics never depend on this call.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from pawjournal.core.exceptions import AssistantError

from .context import PetProfile

CompletionFn = Callable[..., Awaitable[Any]]
"""Async callable with the ``litellm.acompletion`` signature."""

DEFAULT_SYSTEM_PROMPT = (
    "You are a friendly pet health assistant. You help owners understand their pet's "
    "logged health data. You are not a veterinarian; recommend a vet visit whenever "
    "symptoms could be serious."
)


@dataclass(frozen=True)
class AssistantConfig:
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 1024
    recent_event_limit: int = 50

    @classmethod
    def from_config(cls, config: Any) -> "AssistantConfig":
        return cls(
            model=config.get("assistant.model", cls.model),
            temperature=config.get_float("assistant.temperature", cls.temperature),
            max_tokens=config.get_int("assistant.max_tokens", cls.max_tokens),
            recent_event_limit=config.get_int("assistant.recent_event_limit", cls.recent_event_limit),
        )


def _default_completion_fn() -> CompletionFn:
    try:
        import litellm
    except ImportError:
        raise ImportError("Install assistant support with: pip install pawjournal[llm]") from None
    return litellm.acompletion


def extract_text(response: Any) -> str:
    """Pull the reply text out of an OpenAI-shaped response, or ''."""
    choices = getattr(response, "choices", None)
    if not choices:
        logger.warning("Assistant response has no choices")
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(part.get("text", "") for part in content if isinstance(part, dict))
    return ""


def _image_part(image: str) -> dict[str, Any]:
    url = image if image.startswith(("http://", "https://", "data:")) else f"data:image/jpeg;base64,{image}"
    return {"type": "image_url", "image_url": {"url": url}}


class AssistantClient:
    """
    Async client for the remote assistant.

    Args:
        config: Model settings.
        system_prompt: Overrides the default pet-assistant persona.
        completion_fn: Async completion callable; defaults to
            ``litellm.acompletion`` (resolved lazily).
    """

    def __init__(
        self,
        config: AssistantConfig | None = None,
        system_prompt: str | None = None,
        completion_fn: CompletionFn | None = None,
    ):
        self.config = config or AssistantConfig()
        self.system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._completion_fn = completion_fn

    def build_messages(
        self,
        prompt: str,
        pet_profile: PetProfile | None = None,
        recent_events: list[dict[str, Any]] | None = None,
        images: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Assemble the chat messages for one request."""
        context: dict[str, Any] = {}
        if pet_profile is not None:
            context["pet_profile"] = pet_profile.to_context()
        if recent_events:
            context["recent_health_logs"] = recent_events[: self.config.recent_event_limit]

        text = prompt
        if context:
            text = f"{prompt}\n\nContext (JSON):\n{json.dumps(context, default=str, indent=2)}"

        content: str | list[dict[str, Any]] = text
        if images:
            content = [{"type": "text", "text": text}] + [_image_part(img) for img in images]

        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": content},
        ]

    async def complete(
        self,
        prompt: str,
        pet_profile: PetProfile | None = None,
        recent_events: list[dict[str, Any]] | None = None,
        images: list[str] | None = None,
    ) -> str:
        """Send *prompt* with its context and return the reply text.

        Raises:
            AssistantError: On any transport or provider failure, or an
                empty reply.
        """
        if not prompt or not prompt.strip():
            raise AssistantError("Empty prompt", user_message="Please enter a question first.")

        completion_fn = self._completion_fn or _default_completion_fn()
        messages = self.build_messages(prompt, pet_profile, recent_events, images)
        try:
            response = await completion_fn(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            logger.error(f"Assistant error ({type(e).__name__}): {e}")
            raise AssistantError(str(e)) from e

        text = extract_text(response).strip()
        if not text:
            raise AssistantError("Assistant returned an empty reply")
        return text

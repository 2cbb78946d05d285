"""LLM revision backends for accumulated dictation text."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import anthropic
import openai

from vox.config import ReviserProvider
from vox.errors import RevisionError

if TYPE_CHECKING:
    from mlx.nn import Module

    from vox.config import LLMConfig

logger = logging.getLogger(__name__)

# Lead-ins small local models like to put before the actual answer
PREAMBLES = (
    "Sure, here's the refined text:",
    "Sure, here is the refined text:",
    "Sure, here's the revised text:",
    "Sure, here is the revised text:",
    "Here's the refined text:",
    "Here is the refined text:",
    "Here's the revised text:",
    "Here is the revised text:",
    "Refined text:",
    "Revised text:",
    "Sure!",
    "Sure,",
    "Certainly!",
    "Certainly,",
    "Of course!",
    "Of course,",
)


def build_messages(content: str, revision_request: str | None) -> list[dict[str, str]]:
    """User turns for a revision call (the system prompt is sent separately)."""
    if not revision_request:
        return [{"role": "user", "content": f"Refine this spoken text:\n\n{content}"}]
    return [
        {"role": "user", "content": f"Current text:\n\n{content}"},
        {"role": "user", "content": f"Revision request: {revision_request}"},
    ]


class Reviser(ABC):
    """Rewrites accumulated text according to a system prompt and a request."""

    provider: ClassVar[ReviserProvider]
    required_settings: ClassVar[tuple[str, ...]] = ()

    def __init__(self, config: "LLMConfig") -> None:
        self._config = config

    @property
    def name(self) -> str:
        return f"{self.provider.value}:{self._config.model_name}"

    @classmethod
    def can_create(cls, config: "LLMConfig") -> bool:
        return all(getattr(config, key) for key in cls.required_settings)

    def revise(
        self,
        system_prompt: str,
        current_text: str,
        revision_request: str | None = None,
    ) -> str:
        """
        Revise `current_text`.

        Returns the revised text, or `current_text` unchanged when the model
        replies with nothing.

        Raises:
            RevisionError: If the backend call fails.
        """
        messages = build_messages(current_text, revision_request)
        try:
            revised = self._complete(system_prompt, messages)
        except RevisionError:
            raise
        except Exception as e:
            raise RevisionError(f"{self.name} revision failed: {e}") from e

        revised = revised.strip()
        if not revised:
            logger.warning("%s returned empty text, keeping current version", self.name)
            return current_text
        return revised

    @abstractmethod
    def _complete(self, system_prompt: str, messages: list[dict[str, str]]) -> str:
        ...


class AnthropicReviser(Reviser):
    provider = ReviserProvider.ANTHROPIC
    required_settings = ("api_key",)

    def __init__(self, config: "LLMConfig") -> None:
        super().__init__(config)
        self._client = anthropic.Anthropic(api_key=config.api_key)

    def _complete(self, system_prompt: str, messages: list[dict[str, str]]) -> str:
        # Consecutive user turns go out as one message with several text blocks
        response = self._client.messages.create(
            model=self._config.model_name,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
            system=system_prompt,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": message["content"]}
                        for message in messages
                    ],
                }
            ],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


class AzureOpenAIReviser(Reviser):
    provider = ReviserProvider.AZURE_OPENAI
    required_settings = ("api_key", "endpoint")

    def __init__(self, config: "LLMConfig") -> None:
        super().__init__(config)
        self._client = openai.AzureOpenAI(
            azure_endpoint=config.endpoint,
            api_key=config.api_key,
            api_version=config.api_version,
        )

    @property
    def deployment(self) -> str:
        return self._config.deployment or self._config.model_name

    def _complete(self, system_prompt: str, messages: list[dict[str, str]]) -> str:
        response = self._client.chat.completions.create(
            model=self.deployment,
            messages=[{"role": "system", "content": system_prompt}, *messages],
            max_completion_tokens=self._config.max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class MLXReviser(Reviser):
    """Revises text with a local MLX language model."""

    provider = ReviserProvider.MLX

    def __init__(self, config: "LLMConfig") -> None:
        super().__init__(config)
        self._model: "Module | None" = None
        self._tokenizer = None

    def load_model(self) -> None:
        """Load the LLM model."""
        if self._model is not None:
            return

        from mlx_lm import load

        logger.info("Loading LLM model: %s", self._config.model_name)
        self._model, self._tokenizer = load(self._config.model_name)
        logger.info("LLM model loaded")

    def _complete(self, system_prompt: str, messages: list[dict[str, str]]) -> str:
        from mlx_lm import generate
        from mlx_lm.sample_utils import make_sampler

        if self._model is None or self._tokenizer is None:
            self.load_model()

        # Small chat templates expect strictly alternating turns
        user_text = "\n\n".join(message["content"] for message in messages)
        prompt = self._tokenizer.apply_chat_template(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            tokenize=False,
            add_generation_prompt=True,
        )

        result = generate(
            self._model,
            self._tokenizer,
            prompt=prompt,
            max_tokens=self._config.max_tokens,
            sampler=make_sampler(temp=self._config.temperature),
        )
        return self._postprocess(result.strip())

    def _postprocess(self, text: str) -> str:
        """Strip chat preambles and wrapping quotes from model output."""
        text_lower = text.lower()
        for preamble in PREAMBLES:
            if text_lower.startswith(preamble.lower()):
                text = text[len(preamble):].strip()
                text_lower = text.lower()

        for quote in ('"', "'"):
            if len(text) >= 2 and text.startswith(quote) and text.endswith(quote):
                text = text[1:-1]

        return text.lstrip("\n")


REVISERS: dict[ReviserProvider, type[Reviser]] = {
    ReviserProvider.ANTHROPIC: AnthropicReviser,
    ReviserProvider.AZURE_OPENAI: AzureOpenAIReviser,
    ReviserProvider.MLX: MLXReviser,
}


def create_reviser(config: "LLMConfig") -> Reviser | None:
    """
    Resolve the configured revision backend.

    Returns None when revision is disabled, the provider is missing required
    settings, or its client could not be built. None means single-shot mode.
    """
    if not config.enabled:
        logger.info("LLM revision disabled")
        return None

    reviser_cls = REVISERS[config.provider]
    if not reviser_cls.can_create(config):
        missing = [key for key in reviser_cls.required_settings if not getattr(config, key)]
        logger.info(
            "LLM provider %s not configured (missing %s)",
            config.provider.value,
            ", ".join(missing),
        )
        return None

    try:
        reviser = reviser_cls(config)
    except Exception as e:
        logger.warning("Failed to initialize LLM: %s", e)
        return None

    logger.info("Using LLM reviser %s", reviser.name)
    return reviser

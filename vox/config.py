"""Configuration for the vox application."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum


class ReviserProvider(str, Enum):
    ANTHROPIC = "anthropic"
    AZURE_OPENAI = "azure_openai"
    MLX = "mlx"


# Whisper model sizes mapped to their MLX conversions on the Hugging Face hub
WHISPER_MODELS = {
    "tiny": "mlx-community/whisper-tiny-mlx",
    "tiny.en": "mlx-community/whisper-tiny.en-mlx",
    "base": "mlx-community/whisper-base-mlx",
    "base.en": "mlx-community/whisper-base.en-mlx",
    "small": "mlx-community/whisper-small-mlx",
    "small.en": "mlx-community/whisper-small.en-mlx",
    "medium": "mlx-community/whisper-medium-mlx",
    "medium.en": "mlx-community/whisper-medium.en-mlx",
    "large": "mlx-community/whisper-large-v3-mlx",
}

# Approximate download size in MB, shown by --diagnose
WHISPER_MODEL_SIZES_MB = {
    "tiny": 75,
    "tiny.en": 75,
    "base": 140,
    "base.en": 140,
    "small": 466,
    "small.en": 466,
    "medium": 1450,
    "medium.en": 1450,
    "large": 2950,
}

DEFAULT_MODEL_SIZE = "small"

DEFAULT_LLM_MODELS = {
    ReviserProvider.ANTHROPIC: "claude-sonnet-4-20250514",
    ReviserProvider.AZURE_OPENAI: "o4-mini",
    ReviserProvider.MLX: "mlx-community/Qwen2.5-3B-Instruct-4bit",
}

TRUTHY = ("1", "true", "yes", "on")


@dataclass
class AudioConfig:
    sample_rate: int = 16_000
    channels: int = 1
    frame_length: int = 512
    device: int | str | None = None

    @property
    def block_size(self) -> int:
        return self.frame_length

    @property
    def frame_ms(self) -> float:
        return 1000.0 * self.frame_length / self.sample_rate


@dataclass
class WhisperConfig:
    model_size: str = DEFAULT_MODEL_SIZE
    model: str | None = None
    language: str | None = "en"

    @property
    def repo(self) -> str:
        if self.model:
            return self.model
        return WHISPER_MODELS.get(
            self.model_size.lower(), WHISPER_MODELS[DEFAULT_MODEL_SIZE]
        )

    @property
    def approx_size_mb(self) -> int:
        return WHISPER_MODEL_SIZES_MB.get(
            self.model_size.lower(), WHISPER_MODEL_SIZES_MB[DEFAULT_MODEL_SIZE]
        )


@dataclass
class KeybindConfig:
    toggle_key: str = "tab"
    stop_key: str = "enter"
    accept_key: str = "esc"


@dataclass
class LLMConfig:
    enabled: bool = True
    provider: ReviserProvider = ReviserProvider.ANTHROPIC
    api_key: str | None = None
    model: str | None = None
    endpoint: str | None = None
    deployment: str | None = None
    api_version: str = "2025-03-01-preview"
    max_tokens: int = 2048
    temperature: float = 0.0

    @property
    def model_name(self) -> str:
        return self.model or DEFAULT_LLM_MODELS[self.provider]


@dataclass
class ClipboardConfig:
    enabled: bool = True


@dataclass
class Config:
    audio: AudioConfig = field(default_factory=AudioConfig)
    whisper: WhisperConfig = field(default_factory=WhisperConfig)
    keybinds: KeybindConfig = field(default_factory=KeybindConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        config = cls()

        if device := os.environ.get("VOX_AUDIO_DEVICE"):
            config.audio.device = int(device) if device.isdigit() else device

        if size := os.environ.get("VOX_WHISPER_MODEL_SIZE"):
            config.whisper.model_size = size.lower()

        if model := os.environ.get("VOX_WHISPER_MODEL"):
            config.whisper.model = model

        if lang := os.environ.get("VOX_LANGUAGE"):
            config.whisper.language = None if lang.lower() == "auto" else lang

        if toggle := os.environ.get("VOX_TOGGLE_KEY"):
            config.keybinds.toggle_key = toggle.lower()

        if clipboard := os.environ.get("VOX_CLIPBOARD"):
            config.clipboard.enabled = clipboard.lower() in TRUTHY

        if verbose := os.environ.get("VOX_VERBOSE"):
            config.verbose = verbose.lower() in TRUTHY

        if llm_enabled := os.environ.get("VOX_LLM_ENABLED"):
            config.llm.enabled = llm_enabled.lower() in TRUTHY

        if provider := os.environ.get("VOX_LLM_PROVIDER"):
            try:
                config.llm.provider = ReviserProvider(provider.lower())
            except ValueError:
                pass  # Keep default if invalid value

        if llm_model := os.environ.get("VOX_LLM_MODEL"):
            config.llm.model = llm_model

        config.llm.api_key = os.environ.get("VOX_LLM_API_KEY") or _provider_key(
            config.llm.provider
        )

        if endpoint := (
            os.environ.get("VOX_LLM_ENDPOINT") or os.environ.get("AZURE_OPENAI_ENDPOINT")
        ):
            config.llm.endpoint = endpoint

        if deployment := os.environ.get("VOX_LLM_DEPLOYMENT"):
            config.llm.deployment = deployment

        return config


def _provider_key(provider: ReviserProvider) -> str | None:
    if provider == ReviserProvider.ANTHROPIC:
        return os.environ.get("ANTHROPIC_API_KEY")
    if provider == ReviserProvider.AZURE_OPENAI:
        return os.environ.get("AZURE_OPENAI_API_KEY")
    return None

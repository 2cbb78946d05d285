"""Entry point for running vox as a module: python -m vox"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from vox.app import VoxApp
from vox.config import Config
from vox.errors import DeviceError, TranscriptionError

NOISY_LOGGERS = (
    "urllib3",
    "httpx",
    "httpcore",
    "anthropic",
    "openai",
    "mlx",
    "transformers",
    "tokenizers",
    "sounddevice",
)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity setting."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Reduce noise from all third-party libraries
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vox",
        description=(
            "Minimal friction voice transcription. Speak content, toggle to "
            "instruction mode to tell the LLM how to revise it."
        ),
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices",
    )
    parser.add_argument(
        "--diagnose",
        action="store_true",
        help="Check system capabilities and configuration",
    )
    parser.add_argument("--device", help="Input device index or name fragment")
    parser.add_argument("--language", help="Whisper language code, or 'auto'")
    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Disable LLM revision (single pass)",
    )
    parser.add_argument(
        "--no-clipboard",
        action="store_true",
        help="Do not copy the final text to the clipboard",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    if args.device is not None:
        config.audio.device = int(args.device) if args.device.isdigit() else args.device
    if args.language is not None:
        config.whisper.language = None if args.language.lower() == "auto" else args.language
    if args.no_llm:
        config.llm.enabled = False
    if args.no_clipboard:
        config.clipboard.enabled = False
    if args.verbose:
        config.verbose = True
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config = apply_args(Config.from_env(), args)
    setup_logging(config.verbose)

    app = VoxApp(config)

    if args.list_devices:
        app.list_devices()
        return 0
    if args.diagnose:
        app.diagnose()
        return 0

    try:
        text = app.run()
    except KeyboardInterrupt:
        print("\n👋 Interrupted")
        return 130
    except (DeviceError, TranscriptionError) as e:
        print(f"❌ Error: {e}")
        logging.getLogger(__name__).debug("Session aborted", exc_info=True)
        return 1
    except Exception as e:
        logging.exception("Fatal error: %s", e)
        return 1

    return 0 if text else 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
vox - mode-tagged voice dictation

Usage:
    python vox_dictate.py [--list-devices] [--diagnose] [options]

Keys while recording:
    TAB     Toggle between content and instruction mode
    ENTER   Stop recording

Environment Variables:
    VOX_AUDIO_DEVICE        Audio input device index or name fragment
    VOX_WHISPER_MODEL_SIZE  tiny, base, small, medium, large (optionally .en)
    VOX_LANGUAGE            Whisper language code (e.g. 'en', or 'auto')
    VOX_LLM_PROVIDER        anthropic, azure_openai or mlx
    VOX_LLM_API_KEY         API key (falls back to ANTHROPIC_API_KEY / AZURE_OPENAI_API_KEY)
    VOX_LLM_ENABLED         Enable LLM revision: '1' or 'true'
    VOX_CLIPBOARD           Copy the final text to the clipboard: '1' or 'true'
    VOX_VERBOSE             Enable verbose logging: '1' or 'true'
"""

from vox.__main__ import main

if __name__ == "__main__":
    raise SystemExit(main())

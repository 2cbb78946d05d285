"""
vox - mode-tagged voice dictation

Speak content, toggle to instruction mode to say how it should be revised,
and let an LLM apply the revisions over several passes.
"""

__version__ = "0.1.0"

from vox.config import Config
from vox.session import RevisionLoop, run_interactive_session

__all__ = ["Config", "RevisionLoop", "run_interactive_session", "__version__"]

"""
Shared test infrastructure for pyliquid.

Modules:
- file_utils: Utilities for creating files and directories
- rendering_utils: Helpers for building environments and rendering templates
- cli_utils: Running the CLI in a subprocess
"""

from .file_utils import write
from .rendering_utils import make_env, render
from .cli_utils import run_cli, jload

__all__ = [
    "write",
    "make_env",
    "render",
    "run_cli",
    "jload",
]

"""Tool configuration discovery.

Walk-up finder locates the nearest ``pyproject.toml`` carrying a
``[tool.propbind]`` table, similar to how git finds .git/.
Supports the PROPBIND_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "PROPBIND_CONFIG"
TOOL_TABLE = "propbind"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for pyproject.toml.

    Returns the path to the config file, or None if not found.
    Checks PROPBIND_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_tool_table(path: Path) -> dict[str, Any]:
    """Return the ``[tool.propbind]`` table of *path*, or ``{}`` when absent.

    Raises:
        tomllib.TOMLDecodeError: The file is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    table = data.get("tool", {}).get(TOOL_TABLE, {})
    return dict(table) if isinstance(table, dict) else {}

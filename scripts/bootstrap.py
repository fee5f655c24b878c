"""Locate the checkout so ``scripts/classify_users.py`` can import ``src``."""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

# Directories the CLI needs next to scripts/: the code and the default YAML.
_MARKERS = ("src", "configs")


def _resolve_project_root() -> Path:
    root = Path(__file__).resolve().parents[1]
    missing = [marker for marker in _MARKERS if not (root / marker).is_dir()]
    if missing:
        raise RuntimeError(
            f"{root} does not look like the classification project: missing {', '.join(missing)}/."
        )
    return root


@lru_cache(maxsize=1)
def bootstrap_project() -> Path:
    """Return the checkout root, prepending it to ``sys.path`` on first use.

    Relative paths given to the CLI (``--config``, ``--store``, ``--csv``) are
    resolved against the returned directory.
    """

    project_root = _resolve_project_root()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))
    return project_root

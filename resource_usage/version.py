"""
resource_usage.version — semantic version string and VCS describe helper.

Kept tiny and dependency-free; the CLI prints both on `--version` and embeds
`version_metadata()` in JSON reports.

Usage:
    from resource_usage.version import __version__, git_describe, version_metadata
"""

from __future__ import annotations

from functools import lru_cache
import os
import platform
import subprocess
from typing import Dict

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    Return a best-effort 'git describe' style string.

    Resolution order:
      1) Environment override RESOURCE_USAGE_GIT_DESCRIBE.
      2) `git describe --tags --dirty --always` (if .git and git available).
      3) Fallback to `<__version__>+local`.
    """
    override = os.getenv("RESOURCE_USAGE_GIT_DESCRIBE")
    if override:
        return override.strip()

    try:
        out = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always"],
            stderr=subprocess.DEVNULL,
        )
        desc = out.decode("utf-8", "replace").strip()
        if desc:
            return desc
    except (OSError, subprocess.CalledProcessError):
        pass

    return f"{__version__}+local"


def _is_dirty(desc: str) -> bool:
    return desc.endswith("-dirty") or "-dirty-" in desc


@lru_cache(maxsize=1)
def version_metadata() -> Dict[str, str]:
    """
    Tool identification stamped into JSON reports.

    Keys: version, describe, dirty ('true' / 'false'), python.
    """
    desc = git_describe()
    return {
        "version": __version__,
        "describe": desc,
        "dirty": "true" if _is_dirty(desc) else "false",
        "python": platform.python_version(),
    }


__all__ = ["__version__", "git_describe", "version_metadata"]

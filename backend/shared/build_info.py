"""Version and commit reported by the health endpoint.

Both can be pinned through APP_VERSION and GIT_COMMIT. Otherwise the
version comes from the installed distribution metadata and the commit
from the local git checkout, with "dev" when neither is available.
"""

import os
import subprocess
from importlib import metadata

DISTRIBUTION_NAME = "table-banker"


def _installed_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "dev"


def _git_short_sha() -> str:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            text=True,
            stderr=subprocess.DEVNULL,
        ).strip()
    except (FileNotFoundError, subprocess.CalledProcessError):
        return "dev"


APP_VERSION: str = os.environ.get("APP_VERSION") or _installed_version()
GIT_COMMIT: str = os.environ.get("GIT_COMMIT") or _git_short_sha()

"""Build/version metadata.

Run from source the version falls back to a dev marker; packaged builds
inject it through environment variables.
"""

from __future__ import annotations

import os


def get_build_info() -> dict[str, str]:
    """Return build metadata.

    Environment variables (set by CI/build scripts):
    - SEGSTUDIO_VERSION: human readable version (e.g. "0.1.0")
    - SEGSTUDIO_GIT_SHA: short git sha
    """

    return {
        "version": os.getenv("SEGSTUDIO_VERSION", "0.1.0-dev"),
        "git_sha": os.getenv("SEGSTUDIO_GIT_SHA", "dev"),
    }


def get_version_string() -> str:
    info = get_build_info()
    ver = info["version"].strip() or "0.1.0-dev"
    sha = info["git_sha"].strip() or "dev"
    return f"v{ver} ({sha})"

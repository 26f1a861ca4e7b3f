from __future__ import annotations

import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

VERSION = "0.0.1"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def _from_embedded_file() -> Optional[BuildInfo]:
    # Written by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if commit or date:
        return BuildInfo(commit=commit, date=date)
    return None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    commit = _run_git(["rev-parse", "HEAD"], cwd=here)
    if commit is None:
        return None
    date = _run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=here)
    return BuildInfo(commit=commit, date=date)


def get_build_info() -> BuildInfo:
    for getter in (_from_embedded_file, _from_git_repo):
        info = getter()
        if info:
            return info
    return BuildInfo(commit=None, date=None)


def get_version_string() -> str:
    info = get_build_info()
    commit = info.commit[:7] if info.commit else "unknown"
    date = info.date or "unknown"
    return f"lineview {VERSION} ({commit} {date})"

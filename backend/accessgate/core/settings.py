"""Runtime settings (environment variables only).

``AG_*`` variables may also come from a ``.env`` file at the repository root
or in ``backend/``; anything already set in the process environment wins.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterable, Optional


POLICY_PATH_ENV: Final[str] = "AG_POLICY_PATH"
SESSION_BASE_URL_ENV: Final[str] = "AG_SESSION_BASE_URL"
SESSION_TIMEOUT_ENV: Final[str] = "AG_SESSION_TIMEOUT_SECONDS"
JWT_SECRET_ENV: Final[str] = "AG_JWT_SECRET"

DEFAULT_SESSION_BASE_URL: Final[str] = "http://localhost:5000"
DEFAULT_SESSION_TIMEOUT_SECONDS: Final[float] = 10.0

# backend/accessgate/core/settings.py
_REPO_ROOT: Final[Path] = Path(__file__).resolve().parents[3]


@dataclass(frozen=True, slots=True)
class Settings:
    policy_path: Optional[Path]
    session_base_url: str
    session_timeout_seconds: float


def dotenv_files() -> list[Path]:
    return [_REPO_ROOT / ".env", _REPO_ROOT / "backend" / ".env"]


def parse_dotenv(text: str) -> dict[str, str]:
    """``KEY=value`` pairs from ``.env`` text; comments, blanks and junk lines are skipped."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip().removeprefix("export ").strip()
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or key.startswith("#"):
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_dotenv_files(paths: Optional[Iterable[Path]] = None, *, override: bool = False) -> list[Path]:
    """Merge ``.env`` files into ``os.environ``; returns the files that were read."""
    read: list[Path] = []
    for path in dotenv_files() if paths is None else paths:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError:
            continue
        read.append(path)
        for key, value in parse_dotenv(text).items():
            if override or key not in os.environ:
                os.environ[key] = value
    return read


def _session_timeout() -> float:
    raw = os.environ.get(SESSION_TIMEOUT_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_SESSION_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {SESSION_TIMEOUT_ENV}; must be a number.") from e
    if not math.isfinite(value) or value <= 0:
        raise RuntimeError(f"{SESSION_TIMEOUT_ENV} must be a finite number > 0.")
    return value


def get_settings() -> Settings:
    """Read settings from the environment (after loading any ``.env``)."""
    load_dotenv_files()

    policy_raw = os.environ.get(POLICY_PATH_ENV, "").strip()
    base_url = os.environ.get(SESSION_BASE_URL_ENV, "").strip() or DEFAULT_SESSION_BASE_URL

    return Settings(
        policy_path=Path(policy_raw) if policy_raw else None,
        session_base_url=base_url.rstrip("/"),
        session_timeout_seconds=_session_timeout(),
    )

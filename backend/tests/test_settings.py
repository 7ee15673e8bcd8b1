from __future__ import annotations

import os
from pathlib import Path

import pytest

from accessgate.core import settings as settings_mod
from accessgate.core.settings import DEFAULT_SESSION_BASE_URL, get_settings, load_dotenv_files, parse_dotenv


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("AG_POLICY_PATH", "AG_SESSION_BASE_URL", "AG_SESSION_TIMEOUT_SECONDS", "AG_JWT_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_mod, "dotenv_files", lambda: [])


def test_parse_dotenv():
    text = "\n".join(
        [
            "# comment",
            "",
            "AG_JWT_SECRET=abc",
            'AG_SESSION_BASE_URL="http://x"',
            "export AG_POLICY_PATH='/etc/policy.json'",
            "no_equals_sign",
            "=value",
            "AG_SESSION_TIMEOUT_SECONDS = 3 ",
        ]
    )
    assert parse_dotenv(text) == {
        "AG_JWT_SECRET": "abc",
        "AG_SESSION_BASE_URL": "http://x",
        "AG_POLICY_PATH": "/etc/policy.json",
        "AG_SESSION_TIMEOUT_SECONDS": "3",
    }


def test_missing_dotenv_file_is_skipped(tmp_path: Path):
    assert load_dotenv_files([tmp_path / "absent.env"]) == []


def test_dotenv_does_not_override_process_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text("AG_JWT_SECRET=from-file\nAG_SESSION_BASE_URL=http://file\n", encoding="utf-8")
    monkeypatch.setattr(settings_mod, "dotenv_files", lambda: [env_file])
    monkeypatch.setenv("AG_JWT_SECRET", "from-process")
    # Register the variable with monkeypatch so the value loaded from the file is undone.
    monkeypatch.setenv("AG_SESSION_BASE_URL", "placeholder")
    monkeypatch.delenv("AG_SESSION_BASE_URL")

    settings = get_settings()
    assert os.environ["AG_JWT_SECRET"] == "from-process"
    assert settings.session_base_url == "http://file"


def test_dotenv_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text("AG_JWT_SECRET=from-file\n", encoding="utf-8")
    monkeypatch.setenv("AG_JWT_SECRET", "from-process")

    assert load_dotenv_files([env_file], override=True) == [env_file]
    assert os.environ["AG_JWT_SECRET"] == "from-file"


def test_defaults():
    settings = get_settings()
    assert settings.policy_path is None
    assert settings.session_base_url == DEFAULT_SESSION_BASE_URL
    assert settings.session_timeout_seconds == 10.0


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("AG_POLICY_PATH", "/srv/policy.json")
    monkeypatch.setenv("AG_SESSION_BASE_URL", "https://laundry.example/")
    monkeypatch.setenv("AG_SESSION_TIMEOUT_SECONDS", "2.5")
    settings = get_settings()
    assert settings.policy_path == Path("/srv/policy.json")
    assert settings.session_base_url == "https://laundry.example"
    assert settings.session_timeout_seconds == 2.5


@pytest.mark.parametrize("value", ["soon", "0", "-1", "nan", "inf", "-inf"])
def test_invalid_timeout_rejected(monkeypatch: pytest.MonkeyPatch, value: str):
    monkeypatch.setenv("AG_SESSION_TIMEOUT_SECONDS", value)
    with pytest.raises(RuntimeError, match="AG_SESSION_TIMEOUT_SECONDS"):
        get_settings()

from __future__ import annotations

import pytest

from labelcycle.env_auth import EnvAuthConfig, create_env_auth_manager

TOKEN_VARS = ("GITHUB_TOKEN", "GH_TOKEN", "GITHUB_ACCESS_TOKEN", "GH_ACCESS_TOKEN", "GITHUB_PAT", "BOT_TOKEN")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in TOKEN_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


def test_primary_token_var(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "primary")
    manager = create_env_auth_manager(EnvAuthConfig(load_dotenv=False))
    assert manager.get_github_token() == "primary"


def test_alternative_token_var(monkeypatch):
    monkeypatch.setenv("GH_TOKEN", "alt")
    manager = create_env_auth_manager(EnvAuthConfig(load_dotenv=False))
    assert manager.get_github_token() == "alt"


def test_custom_token_var(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "bot")
    manager = create_env_auth_manager(EnvAuthConfig(load_dotenv=False, github_token_var="BOT_TOKEN"))
    assert manager.get_github_token() == "bot"


def test_no_token():
    assert create_env_auth_manager(EnvAuthConfig(load_dotenv=False)).get_github_token() is None


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    # Record GITHUB_TOKEN so the value load_dotenv writes is undone at teardown.
    monkeypatch.setenv("GITHUB_TOKEN", "placeholder")
    monkeypatch.delenv("GITHUB_TOKEN")
    (tmp_path / ".env").write_text("GITHUB_TOKEN=from-dotenv\n")
    manager = create_env_auth_manager()
    assert manager.dotenv_loaded is True
    assert manager.get_github_token() == "from-dotenv"

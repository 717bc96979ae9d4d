"""
Tests for config module.
"""

from pathlib import Path

from config import Settings


def test_defaults(monkeypatch):
    for name in ["GITHUB_OWNER", "GITHUB_REPO", "GITHUB_PATH", "GITHUB_TOKEN", "SPELLING_STORAGE_DIR"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env(dotenv=False)

    assert settings.storage_path.name == "kid_custom_words_v1.json"
    assert not settings.remote_enabled
    assert settings.success_delay == 0.8
    assert settings.failure_delay == 0.7


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SPELLING_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("GITHUB_OWNER", "family")
    monkeypatch.setenv("GITHUB_REPO", "words")
    monkeypatch.setenv("GITHUB_PATH", "/data/words.json")
    monkeypatch.setenv("GITHUB_BRANCH", "main")
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3/")
    monkeypatch.setenv("SPELLING_VOICE_LANG", "FR-fr")

    settings = Settings.from_env(dotenv=False)

    assert settings.storage_path == Path(tmp_path) / "kid_custom_words_v1.json"
    assert settings.github_path == "data/words.json"
    assert settings.github_api_url == "https://github.example.com/api/v3"
    assert settings.voice_lang == "fr"
    assert settings.remote_enabled


def test_bad_number_falls_back(monkeypatch):
    monkeypatch.setenv("SPELLING_SUCCESS_DELAY", "soon")

    assert Settings.from_env(dotenv=False).success_delay == 0.8

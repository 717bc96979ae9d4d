# config.py
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ── defaults ─────────────────────────────────────────────────────────────

DEFAULT_STORAGE_KEY = "kid_custom_words_v1"
DEFAULT_STORAGE_DIR = Path.home() / ".spelling_game"
DEFAULT_API_URL = "https://api.github.com"

SUCCESS_DELAY = 0.8  # seconds before the next word appears
FAILURE_DELAY = 0.7  # seconds before the slots are cleared


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    storage_dir: Path = DEFAULT_STORAGE_DIR
    storage_key: str = DEFAULT_STORAGE_KEY

    github_owner: str = ""
    github_repo: str = ""
    github_path: str = ""
    github_branch: str = "main"
    github_token: str = ""
    github_api_url: str = DEFAULT_API_URL
    http_timeout: float = 10.0

    success_delay: float = SUCCESS_DELAY
    failure_delay: float = FAILURE_DELAY
    voice_lang: str = "en"
    log_level: str = "INFO"

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_dir) / f"{self.storage_key}.json"

    @property
    def remote_enabled(self) -> bool:
        return all(
            (
                self.github_owner,
                self.github_repo,
                self.github_path,
                self.github_branch,
                self.github_token,
            )
        )

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Read settings from the environment (and `.env` when present)."""
        if dotenv:
            load_dotenv()

        storage_dir = os.getenv("SPELLING_STORAGE_DIR")
        return cls(
            storage_dir=Path(storage_dir).expanduser() if storage_dir else DEFAULT_STORAGE_DIR,
            storage_key=os.getenv("SPELLING_STORAGE_KEY") or DEFAULT_STORAGE_KEY,
            github_owner=os.getenv("GITHUB_OWNER", "").strip(),
            github_repo=os.getenv("GITHUB_REPO", "").strip(),
            github_path=os.getenv("GITHUB_PATH", "").strip().lstrip("/"),
            github_branch=os.getenv("GITHUB_BRANCH", "main").strip(),
            github_token=os.getenv("GITHUB_TOKEN", "").strip(),
            github_api_url=(os.getenv("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            http_timeout=_float_env("SPELLING_HTTP_TIMEOUT", 10.0),
            success_delay=_float_env("SPELLING_SUCCESS_DELAY", SUCCESS_DELAY),
            failure_delay=_float_env("SPELLING_FAILURE_DELAY", FAILURE_DELAY),
            voice_lang=(os.getenv("SPELLING_VOICE_LANG") or "en")[:2].lower(),
            log_level=(os.getenv("SPELLING_LOG_LEVEL") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

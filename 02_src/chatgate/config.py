"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "traces.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
CHATS_FILE = "chats.json"

DEFAULT_BOT_NAME = "AI Assistant"
DEFAULT_WEB_SEARCH_MAX_USES = 3


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve TRACE_DB_PATH to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_data_dir(env_value: PathLike | None = None) -> Path:
    """Resolve DATA_DIR to an absolute directory path."""
    if not env_value:
        return DATA_DIR

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def users_file_name(target_chat_id: str | None) -> str:
    """Users registry file name, scoped to the target chat when one is set."""
    if not target_chat_id:
        return "users.json"
    return f"users_{target_chat_id.replace('-', '_')}.json"


@dataclass
class GatewayConfig:
    """Runtime settings of the gateway."""

    bot_name: str = DEFAULT_BOT_NAME
    telegram_token: str | None = None
    target_chat_id: str | None = None
    startup_message: str = ""
    data_dir: Path = DATA_DIR
    # 0 disables the web search tool
    web_search_max_uses: int = DEFAULT_WEB_SEARCH_MAX_USES

    def __post_init__(self) -> None:
        if not self.startup_message:
            self.startup_message = f"Привет! Я {self.bot_name}, готов к работе! 🚀"

    @property
    def chats_path(self) -> Path:
        return self.data_dir / CHATS_FILE

    @property
    def users_path(self) -> Path:
        return self.data_dir / users_file_name(self.target_chat_id)

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build settings from environment variables."""
        return cls(
            bot_name=os.getenv("BOT_NAME") or DEFAULT_BOT_NAME,
            telegram_token=os.getenv("TELEGRAM_TOKEN"),
            target_chat_id=os.getenv("TARGET_CHAT_ID") or None,
            startup_message=os.getenv("STARTUP_MESSAGE", ""),
            data_dir=resolve_data_dir(os.getenv("DATA_DIR")),
            web_search_max_uses=int(os.getenv("WEB_SEARCH_MAX_USES", DEFAULT_WEB_SEARCH_MAX_USES)),
        )

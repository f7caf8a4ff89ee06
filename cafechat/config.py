# cafechat/config.py
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel

from .errors import ConfigurationMissing

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_INVENTORY_PATH = PROJECT_ROOT / "data" / "inventory.json"

WORKSPACE_PLACEHOLDER = "<workspace-id>"

WORKSPACE_MISSING_MSG = (
    "The app has not been configured with a <b>WORKSPACE_ID</b> environment variable. "
    "Please set it (see the README) before chatting. <br>"
)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() not in {"", "0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except Exception:
        return default


class Settings(BaseModel):
    workspace_id: str = ""
    openai_api_key: str = ""
    nlu_model: str = "gpt-5-mini"

    inventory_path: Path = DEFAULT_INVENTORY_PATH
    inventory_url: str = ""
    nosql_username: str = ""
    nosql_password: str = ""

    wait_time_minutes: int = 10
    atomic_orders: bool = False
    log_level: str = "INFO"

    @property
    def workspace_configured(self) -> bool:
        ws = self.workspace_id.strip()
        return bool(ws) and ws != WORKSPACE_PLACEHOLDER

    def require_workspace(self) -> str:
        if not self.workspace_configured:
            raise ConfigurationMissing(WORKSPACE_MISSING_MSG)
        return self.workspace_id.strip()


def load_settings() -> Settings:
    """Read settings from the environment (call load_dotenv() first to pick up .env)."""
    return Settings(
        workspace_id=os.getenv("WORKSPACE_ID", "").strip(),
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
        nlu_model=os.getenv("NLU_MODEL", "gpt-5-mini").strip() or "gpt-5-mini",
        inventory_path=Path(os.getenv("INVENTORY_PATH", str(DEFAULT_INVENTORY_PATH))),
        inventory_url=os.getenv("INVENTORY_URL", "").strip(),
        nosql_username=os.getenv("NO_SQL_USERNAME", ""),
        nosql_password=os.getenv("NO_SQL_PASSWORD", ""),
        wait_time_minutes=_env_int("WAIT_TIME_MINUTES", 10),
        atomic_orders=_env_flag("ATOMIC_ORDERS"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )

# cafechat/errors.py
from __future__ import annotations


class CafeChatError(Exception):
    """Base for errors raised by cafechat."""


class ConfigurationMissing(CafeChatError):
    """Required setting (e.g. WORKSPACE_ID) is not configured. Shown to the user as-is."""


class UpstreamServiceError(CafeChatError):
    """The NLU service call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code or 500


class InventoryLoadError(CafeChatError):
    """The inventory seed could not be fetched or parsed."""

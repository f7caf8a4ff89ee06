# cafechat/ordering/inventory_loader.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..errors import InventoryLoadError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_S = 10.0


def parse_inventory_document(data: Any) -> Dict[str, Any]:
    """
    Accepts either a bare {category: {item: stock}} document or a document-store
    `_all_docs?include_docs=true` listing, in which case the first row's doc is used.
    Store bookkeeping keys (_id, _rev, ...) are dropped.
    """
    if isinstance(data, dict) and isinstance(data.get("rows"), list):
        rows = data["rows"]
        if not rows or not isinstance(rows[0], dict):
            raise InventoryLoadError("Inventory listing has no rows")
        data = rows[0].get("doc")

    if not isinstance(data, dict):
        raise InventoryLoadError(f"Inventory document must be an object, got {type(data).__name__}")

    return {k: v for k, v in data.items() if not str(k).startswith("_")}


def load_inventory_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise InventoryLoadError(f"Inventory file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InventoryLoadError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InventoryLoadError(f"Could not read {path}: {e}") from e
    return parse_inventory_document(data)


async def fetch_inventory(
    url: str,
    username: str = "",
    password: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    auth = httpx.BasicAuth(username, password) if username else None
    try:
        async with httpx.AsyncClient(timeout=FETCH_TIMEOUT_S, transport=transport) as client:
            resp = await client.get(url, auth=auth)
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPError as e:
        raise InventoryLoadError(f"Could not fetch inventory from {url}: {e}") from e
    except ValueError as e:
        raise InventoryLoadError(f"Inventory response from {url} is not JSON") from e
    return parse_inventory_document(data)


async def load_inventory(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Seed document from INVENTORY_URL when set, else from INVENTORY_PATH."""
    if settings.inventory_url:
        logger.info("Fetching inventory from %s", settings.inventory_url)
        return await fetch_inventory(
            settings.inventory_url,
            username=settings.nosql_username,
            password=settings.nosql_password,
            transport=transport,
        )
    logger.info("Reading inventory from %s", settings.inventory_path)
    return load_inventory_file(settings.inventory_path)

# cafechat/main.py
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from .ai_intent import ConversationService
from .config import Settings, load_settings
from .errors import ConfigurationMissing, InventoryLoadError, UpstreamServiceError
from .models import CartOut, MessageIn
from .ordering.brain import OrderEngine
from .ordering.inventory_loader import load_inventory

# Load .env locally (safe in prod too)
load_dotenv()

settings = load_settings()

log_level = getattr(logging, settings.log_level, logging.INFO)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
logging.getLogger("cafechat").setLevel(log_level)

logger = logging.getLogger(__name__)

engine = OrderEngine(
    wait_time_minutes=settings.wait_time_minutes,
    atomic=settings.atomic_orders,
)
conversation = ConversationService(settings)


async def seed_inventory(engine: OrderEngine, settings: Settings) -> bool:
    """Load the inventory seed into the engine. Until this finishes every order is refused."""
    try:
        seed = await load_inventory(settings)
    except InventoryLoadError as e:
        logger.error("Inventory not loaded: %s", e)
        return False
    except Exception:
        # background task: nobody awaits the result, so report it here
        logger.exception("Inventory not loaded: unexpected error")
        return False
    engine.load_inventory(seed)
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(seed_inventory(engine, settings))
    yield
    if not task.done():
        task.cancel()
    with suppress(asyncio.CancelledError):
        await task


app = FastAPI(
    title="Coffee Shop Ordering Assistant",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)


# -------------------
# Dependencies
# -------------------
def get_settings() -> Settings:
    return settings


def get_engine() -> OrderEngine:
    return engine


def get_conversation() -> ConversationService:
    return conversation


# -------------------
# Errors
# -------------------
@app.exception_handler(ConfigurationMissing)
async def configuration_missing_handler(request: Request, exc: ConfigurationMissing):
    return JSONResponse({"output": {"text": str(exc)}})


@app.exception_handler(UpstreamServiceError)
async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
    return JSONResponse({"error": str(exc), "code": exc.status_code}, status_code=exc.status_code)


# -------------------
# Health
# -------------------
@app.get("/")
def root(engine: OrderEngine = Depends(get_engine)):
    return {"ok": True, "service": "cafechat", "inventory_loaded": engine.inventory.loaded}


# -------------------
# Chat
# -------------------
@app.post("/api/message")
async def message(
    payload: MessageIn,
    settings: Settings = Depends(get_settings),
    engine: OrderEngine = Depends(get_engine),
    conversation: ConversationService = Depends(get_conversation),
) -> Dict[str, Any]:
    workspace = settings.require_workspace()

    data = await conversation.message(
        {
            "workspace_id": workspace,
            "input": payload.input,
            "context": payload.context,
        }
    )
    return engine.update_message(data)


@app.get("/api/cart", response_model=CartOut)
def cart(engine: OrderEngine = Depends(get_engine)) -> CartOut:
    items, summary = engine.cart_snapshot()
    return CartOut(items=items, summary=summary)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cafechat.main:app", host="0.0.0.0", port=8000, reload=True)

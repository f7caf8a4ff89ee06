# cafechat/models.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageIn(BaseModel):
    """Body of POST /api/message. The client keeps the dialog context between turns."""
    input: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)


class Intent(BaseModel):
    intent: str
    confidence: float = 0.0


class Entity(BaseModel):
    entity: str
    value: str


class Output(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: List[str] = Field(default_factory=list)


class ConversationTurn(BaseModel):
    """One NLU result. Unknown fields are kept and sent back to the client."""
    model_config = ConfigDict(extra="allow")

    intents: List[Intent] = Field(default_factory=list)
    entities: List[Entity] = Field(default_factory=list)
    output: Output = Field(default_factory=Output)
    input: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)


class CartLine(BaseModel):
    item: str
    size: Optional[str] = None
    milk: Optional[str] = None
    flavor: Optional[str] = None
    quantity: int


class CartOut(BaseModel):
    items: List[CartLine]
    summary: str

# cafechat/ai_intent.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from .config import Settings
from .errors import UpstreamServiceError
from .models import ConversationTurn

logger = logging.getLogger(__name__)

SYSTEM = """You are the language-understanding layer of a coffee shop ordering assistant.
Read the customer's message and return ONE JSON object matching the provided schema.
Rules:
- intents: the single best intent first, with a confidence between 0 and 1.
  Use "order" when they ask for drinks or food, "provide_id" when they give their name
  or order number, "review_order" when they ask what is in their order, "greeting",
  "goodbye" or "unknown" otherwise.
- entities: one entry per mention, in the order they appear.
  Kinds: "coffee" (espresso drinks), "drink" (other drinks), "size", "milk", "flavor",
  "number" (a quantity, digits only), or a food category such as "pastry" or "food".
  Values are lowercase singular names ("latte", "muffin", "skim", "vanilla").
- output.text: the assistant's reply as a list of short fragments.
  For "order" put the placeholder {0} where the stock result will go.
  For "provide_id" put {0} where the wait time in minutes will go.
  For "review_order" put {0} where the list of ordered items will go.
- Never invent items the customer did not mention.
"""

# JSON Schema for Structured Outputs
TURN_SCHEMA: Dict[str, Any] = {
    "type": "json_schema",
    "name": "conversation_turn",
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "intents": {
                "type": "array",
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "intent": {"type": "string"},
                        "confidence": {"type": "number"},
                    },
                    "required": ["intent", "confidence"],
                },
            },
            "entities": {
                "type": "array",
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "entity": {"type": "string"},
                        "value": {"type": "string"},
                    },
                    "required": ["entity", "value"],
                },
            },
            "output": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "text": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["text"],
            },
        },
        "required": ["intents", "entities", "output"],
    },
    "strict": True,
}


class ConversationService:
    """Turns a chat message into an NLU turn (intents, entities, reply template)."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None) -> None:
        self._settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._settings.openai_api_key or None)
        return self._client

    async def message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        payload: {"workspace_id", "input": {"text"}, "context"}.
        Returns the turn as a plain dict, with the caller's input/context echoed back.
        """
        user_input = payload.get("input") or {}
        context = payload.get("context") or {}
        request = {"message": user_input.get("text") or "", "context": context}

        try:
            resp = await self.client.responses.create(
                model=self._settings.nlu_model,
                input=[
                    {"role": "system", "content": SYSTEM},
                    {"role": "user", "content": json.dumps(request, ensure_ascii=False)},
                ],
                text={"format": TURN_SCHEMA},
                metadata={"workspace_id": str(payload.get("workspace_id") or "")},
            )
        except openai.APIStatusError as e:
            logger.error("NLU call failed (%s): %s", e.status_code, e)
            raise UpstreamServiceError(str(e), status_code=e.status_code) from e
        except openai.OpenAIError as e:
            logger.error("NLU call failed: %s", e)
            raise UpstreamServiceError(str(e)) from e

        try:
            turn = ConversationTurn.model_validate_json(resp.output_text)
        except ValidationError as e:
            logger.error("NLU returned an unusable turn: %s", e)
            raise UpstreamServiceError("Malformed response from the NLU service") from e

        data = turn.model_dump()
        data["input"] = user_input
        data["context"] = context
        return data

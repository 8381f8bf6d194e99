# -*- coding: utf-8 -*-
"""
Single-shot chat-model client that pulls the ```json verdict out of a reply.

The model is reached through a tool-less langchain agent. One attempt per
prompt: transport problems become ServiceError, replies without a parseable
```json block become MalformedResponseError.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any, Callable, Dict, Optional

from langchain.agents import create_agent
from langchain.chat_models import init_chat_model

from .errors import MalformedResponseError, ServiceError
from .logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_MODEL = "google_genai:gemini-2.5-flash"
JSON_BLOCK_RE = re.compile(r"```json\s*(\{.*?\})\s*```", re.DOTALL)

AgentFactory = Callable[[str, str], Any]


def _default_agent_factory(model: str, credential: str) -> Any:
    chat_model = init_chat_model(model, api_key=credential)
    return create_agent(model=chat_model, tools=[])


def _message_text(message: Any) -> str:
    """Flatten langchain message content (plain string or list of parts)."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return ""


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _body_of(exc: BaseException) -> str:
    response = getattr(exc, "response", None)
    text = getattr(response, "text", None)
    if isinstance(text, str) and text:
        return text
    return str(exc)


def extract_json_payload(text: str) -> Dict[str, Any]:
    """Parse the first ```json {...}``` block of a model reply."""
    match = JSON_BLOCK_RE.search(text or "")
    if not match:
        raise MalformedResponseError("Model response did not contain a valid JSON code block.")
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Failed to parse JSON from model: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedResponseError("Model JSON block is not an object.")
    return payload


class ReasoningClient:
    """Send one prompt to the configured chat model and return its JSON payload."""

    def __init__(self, model: Optional[str] = None, agent_factory: Optional[AgentFactory] = None) -> None:
        self.model = model or os.getenv("ICT_MODEL", DEFAULT_MODEL)
        self._agent_factory = agent_factory or _default_agent_factory
        self._agents: Dict[str, Any] = {}

    def _agent_for(self, credential: str) -> Any:
        agent = self._agents.get(credential)
        if agent is None:
            agent = self._agent_factory(self.model, credential)
            self._agents[credential] = agent
        return agent

    async def evaluate(self, prompt: str, credential: str) -> Dict[str, Any]:
        messages = {"messages": [{"role": "user", "content": prompt}]}
        try:
            result = await self._agent_for(credential).ainvoke(messages)
        except Exception as exc:
            status = _status_of(exc)
            LOGGER.warning("Model call failed (status=%s): %s", status, exc)
            raise ServiceError(
                f"Model API error ({status if status is not None else 'no status'}): {exc}",
                status_code=status,
                body=_body_of(exc),
            ) from exc

        reply = result["messages"][-1] if result.get("messages") else None
        text = _message_text(reply) if reply is not None else ""
        if not text:
            raise MalformedResponseError("No response text from model.")
        LOGGER.debug("Model reply: %s", text)
        return extract_json_payload(text)


__all__ = ["ReasoningClient", "extract_json_payload", "DEFAULT_MODEL"]

# src/chatwire/core/context.py
from __future__ import annotations
import json
from typing import Dict, List, Literal

from .errors import DecodeError

Role = Literal["system", "user", "assistant"]
Message = Dict[str, str]

ROLES = ("system", "user", "assistant")


def load_context(serialized: str) -> List[Message]:
    """
    Deserialize a context previously produced by dump_context.
    Empty string means a new conversation.
    """
    if not serialized or not serialized.strip():
        return []
    try:
        raw = json.loads(serialized)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Backend context is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise DecodeError("Backend context must be a JSON array of messages")

    messages: List[Message] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or "role" not in item or "content" not in item:
            raise DecodeError(f"Backend context message #{i} must have 'role' and 'content'")
        role = str(item["role"])
        if role not in ROLES:
            raise DecodeError(f"Backend context message #{i} has unknown role '{role}'")
        if not isinstance(item["content"], str):
            raise DecodeError(f"Backend context message #{i} content must be a string")
        messages.append({"role": role, "content": item["content"]})
    return messages


def dump_context(messages: List[Message]) -> str:
    # Only role/content survive the round-trip; order is preserved as given
    return json.dumps(
        [{"role": m["role"], "content": m["content"]} for m in messages],
        ensure_ascii=False,
    )


def append_message(messages: List[Message], role: Role, content: str) -> List[Message]:
    if role not in ROLES:
        raise ValueError(f"Unknown role '{role}'")
    messages.append({"role": role, "content": content})
    return messages

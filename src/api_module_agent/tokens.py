"""Token estimation shared by the partitioner and the prompt assembler.

This is a fixed heuristic (one token per four characters of text), not a
real tokenizer. Structured values are measured through their compact JSON
encoding so a module document and its on-disk size stay comparable.
"""

import json
import math
from typing import Any

from pydantic import BaseModel

CHARS_PER_TOKEN = 4


def canonical_json(value: Any) -> str:
    """Encode a value as compact JSON, dumping pydantic models by alias."""
    return json.dumps(_plain(value), separators=(",", ":"), ensure_ascii=False)


def estimate_tokens(value: Any) -> int:
    """Estimate tokens for a string, or for the canonical JSON of any other value."""
    text = value if isinstance(value, str) else canonical_json(value)
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value

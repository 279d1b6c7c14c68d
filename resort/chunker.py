"""Token estimation and greedy token-budget chunking of records."""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Sequence


Record = Dict[str, str]

DEFAULT_TOKEN_BUDGET = 800
CHARS_PER_TOKEN = 4


def serialize(payload: Any) -> str:
    """Compact, whitespace-free JSON text used for size estimates."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def estimate_tokens(payload: Any) -> int:
    return math.ceil(len(serialize(payload)) / CHARS_PER_TOKEN)


def chunk_records(
    records: Sequence[Record], budget: int = DEFAULT_TOKEN_BUDGET
) -> List[List[Record]]:
    """Pack records left to right into chunks whose estimated size stays within budget.

    A record that alone exceeds the budget is never split and ends up in a
    chunk of its own. Input order is preserved and no chunk is empty.

    Args:
        records: Records in the order they should be returned
        budget: Maximum estimated tokens per multi-record chunk

    Returns:
        List of chunks; empty input yields an empty list
    """
    if budget < 1:
        raise ValueError(f"Token budget must be a positive integer, got {budget}")

    chunks: List[List[Record]] = []
    current: List[Record] = []
    current_size = 0

    for record in records:
        size = estimate_tokens(record)
        if current and current_size + size > budget:
            chunks.append(current)
            current = []
            current_size = 0
        current.append(record)
        current_size += size

    if current:
        chunks.append(current)

    return chunks

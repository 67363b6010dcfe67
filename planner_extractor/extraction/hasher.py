"""Extraction hash: a short SHA-256 token binding one call's output.

The canonical form is compact JSON with a fixed key order::

    {"items": [...], "plannerId": "...", "nonce": "...", "date": "..."}

Timestamp and nonce are part of the input, so the hash identifies one specific
extraction call rather than the planner content alone.
"""

from __future__ import annotations

import hashlib
import json
from typing import Sequence

from planner_extractor.extraction.models import Item

HASH_LENGTH = 12


def canonical_payload(
    items: Sequence[Item], planner_id: str, nonce: str, timestamp: str
) -> bytes:
    payload = {
        "items": [item.to_dict() for item in items],
        "plannerId": planner_id,
        "nonce": nonce,
        "date": timestamp,
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_extraction_hash(
    items: Sequence[Item], planner_id: str, nonce: str, timestamp: str
) -> str:
    """Return the first 12 hex characters of the SHA-256 of the canonical payload."""
    digest = hashlib.sha256(canonical_payload(items, planner_id, nonce, timestamp))
    return digest.hexdigest()[:HASH_LENGTH]

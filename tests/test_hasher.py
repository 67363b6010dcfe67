"""Tests for the extraction hash."""

from __future__ import annotations

import hashlib
import json
import re

from planner_extractor.extraction.hasher import canonical_payload, compute_extraction_hash
from planner_extractor.extraction.models import Item

ITEMS = [
    Item(raw_name="METOD 60x80", gamme="METOD"),
    Item(raw_name="Évier", gamme="UNKNOWN"),
]
PLANNER_ID = "3FA85F64-5717-4562-B3FC-2C963F66AFA6"
NONCE = "nonce-1"
DATE = "2026-01-15T10:30:00.000Z"


class TestComputeExtractionHash:
    def test_is_twelve_hex_chars(self) -> None:
        value = compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, DATE)
        assert re.fullmatch(r"[0-9a-f]{12}", value)

    def test_deterministic(self) -> None:
        assert compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, DATE) == compute_extraction_hash(
            list(ITEMS), PLANNER_ID, NONCE, DATE
        )

    def test_each_field_changes_hash(self) -> None:
        base = compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, DATE)
        assert compute_extraction_hash(ITEMS[:1], PLANNER_ID, NONCE, DATE) != base
        assert compute_extraction_hash(ITEMS, PLANNER_ID.lower(), NONCE, DATE) != base
        assert compute_extraction_hash(ITEMS, PLANNER_ID, "nonce-2", DATE) != base
        assert compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, "2026-01-15T10:30:00.001Z") != base

    def test_item_order_matters(self) -> None:
        base = compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, DATE)
        assert compute_extraction_hash(list(reversed(ITEMS)), PLANNER_ID, NONCE, DATE) != base

    def test_matches_sha256_of_canonical_form(self) -> None:
        expected = hashlib.sha256(canonical_payload(ITEMS, PLANNER_ID, NONCE, DATE)).hexdigest()[:12]
        assert compute_extraction_hash(ITEMS, PLANNER_ID, NONCE, DATE) == expected


class TestCanonicalPayload:
    def test_fixed_key_order_and_compact_json(self) -> None:
        payload = canonical_payload(ITEMS[:1], PLANNER_ID, NONCE, DATE).decode("utf-8")
        assert payload == (
            '{"items":[{"raw_name":"METOD 60x80","gamme":"METOD","qty":1}],'
            f'"plannerId":"{PLANNER_ID}","nonce":"{NONCE}","date":"{DATE}"}}'
        )

    def test_non_ascii_kept_verbatim(self) -> None:
        payload = canonical_payload(ITEMS, PLANNER_ID, NONCE, DATE).decode("utf-8")
        assert "Évier" in payload
        assert json.loads(payload)["items"][1]["raw_name"] == "Évier"

    def test_article_items_serialise_article_number(self) -> None:
        item = Item(raw_name="ctx 123.456.78", article_number="123.456.78")
        payload = json.loads(canonical_payload([item], PLANNER_ID, NONCE, DATE))
        assert payload["items"] == [
            {"raw_name": "ctx 123.456.78", "article_number": "123.456.78", "qty": 1}
        ]

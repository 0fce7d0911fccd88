# Overview: Pytest coverage for human-readable identifier generation.

import re

from stockroom.services.identifier_service import (
    category_hint,
    generate_product_id,
    generate_supplier_id,
    generate_tenant_id,
    generate_transaction_id,
)

NOW_MS = 1760605509123


class TestCategoryHint:

    def test_first_three_letters_upper_cased(self):
        assert category_hint("Hardware") == "HAR"

    def test_short_category_kept_whole(self):
        assert category_hint("tv") == "TV"

    def test_missing_category_falls_back(self):
        assert category_hint(None) == "PRD"
        assert category_hint("   ") == "PRD"


class TestGenerators:

    def test_product_id_embeds_category_time_and_random(self):
        assert generate_product_id("Electronics", now_ms=NOW_MS, rand=42) == f"PRDELE{NOW_MS}42"

    def test_product_id_without_category(self):
        assert generate_product_id("", now_ms=NOW_MS, rand=7) == f"PRDPRD{NOW_MS}7"

    def test_other_prefixes(self):
        assert generate_supplier_id(now_ms=NOW_MS, rand=0) == f"SUP{NOW_MS}0"
        assert generate_transaction_id(now_ms=NOW_MS, rand=999) == f"TRN{NOW_MS}999"
        assert generate_tenant_id(now_ms=NOW_MS, rand=5) == f"INV{NOW_MS}5"

    def test_unpinned_ids_use_current_time(self):
        """Without pins the id is prefix + 13-digit millis + 1-3 digit suffix."""
        assert re.fullmatch(r"TRN\d{13}\d{1,3}", generate_transaction_id())
        assert re.fullmatch(r"PRDHAR\d{13}\d{1,3}", generate_product_id("hardware"))

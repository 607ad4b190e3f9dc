"""
Unit tests for category derivation, ranking and CLI filter parsing.
"""

from __future__ import annotations

from republisher.categories import (
    DEFAULT_CATEGORY,
    PROCESSING_HIERARCHY,
    category_from_name,
    category_rank,
    normalize_categories,
    parse_requested_categories,
)


def test_hierarchy_order():
    assert PROCESSING_HIERARCHY == (
        "IS", "LS", "TH", "CS", "BL", "SBL", "OS", "API", "AP", "CW", "UI",
    )
    assert DEFAULT_CATEGORY == "UI"


def test_category_from_name_uses_last_underscore_token():
    assert category_from_name("Orders_CS") == "CS"
    assert category_from_name("Core_Billing_SBL") == "SBL"
    assert category_from_name("Member_API") == "API"


def test_category_from_name_unknown_suffix_defaults_to_ui():
    assert category_from_name("Portal") == "UI"
    assert category_from_name("Orders_Helpers") == "UI"
    # Suffix match is case-sensitive
    assert category_from_name("Orders_cs") == "UI"


def test_category_rank_follows_hierarchy():
    ranks = [category_rank(code) for code in PROCESSING_HIERARCHY]
    assert ranks == sorted(ranks)
    assert category_rank("IS") == 0
    assert category_rank("OS") < category_rank("UI")


def test_category_rank_unknown_after_all_known():
    assert category_rank("ZZ") > category_rank("UI")
    assert category_rank("") == len(PROCESSING_HIERARCHY)


def test_parse_requested_categories_absent_or_blank_means_all():
    assert parse_requested_categories(None) is None
    assert parse_requested_categories("") is None
    assert parse_requested_categories("   ") is None


def test_parse_requested_categories_case_insensitive_and_trimmed():
    assert parse_requested_categories("os") == ("OS",)
    assert parse_requested_categories(" os, ui ,Bl") == ("OS", "UI", "BL")


def test_parse_requested_categories_drops_invalid_and_duplicates():
    assert parse_requested_categories("OS,nope,os,SBL") == ("OS", "SBL")


def test_parse_requested_categories_all_invalid_falls_back_to_all():
    assert parse_requested_categories("foo,bar") is None
    assert parse_requested_categories(",,") is None


def test_normalize_categories_canonicalizes_iterables():
    assert normalize_categories(None) is None
    assert normalize_categories(["os", " Ui ", "OS"]) == ("OS", "UI")
    assert normalize_categories("bl,sbl") == ("BL", "SBL")


def test_normalize_categories_without_valid_codes_means_all():
    assert normalize_categories([]) is None
    assert normalize_categories(["bogus"]) is None
    assert normalize_categories(frozenset({"nope", ""})) is None

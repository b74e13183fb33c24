import pytest

from tablesplit.merge import (
    ColumnMatcher,
    build_column_mapping,
    levenshtein,
    normalize_column_name,
    similarity,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Name", "name"),
        ("name ", "name"),
        (" Unit  Price", "unit_price"),
        ("Unit Price (EGP)", "unit_price_egp"),
        ("Área m²", "rea_m"),
        ("Q1-2024", "q12024"),
        (2024, "2024"),
        (12.0, "12"),
        (None, ""),
        ("already_snake_case", "already_snake_case"),
    ],
)
def test_normalize_column_name(raw, expected):
    assert normalize_column_name(raw) == expected


class TestSimilarity:

    def test_levenshtein_classic_cases(self):
        assert levenshtein("kitten", "sitting") == 3
        assert levenshtein("", "abc") == 3
        assert levenshtein("flaw", "lawn") == 2
        assert levenshtein("Name", "name") == 1

    def test_identical_and_empty(self):
        assert similarity("price", "price") == 100
        assert similarity("", "") == 100
        assert similarity("abc", "") == 0

    def test_score_scale(self):
        # 1 edit over 10 characters
        assert similarity("unit_price", "unit_pricc") == 90
        # 2 edits over 3 characters: (1 - 2/3) * 100 = 33.3
        assert similarity("abc", "axy") == 33

    def test_halves_round_up(self):
        # 3 edits over 8 characters: 62.5 → 63
        assert similarity("abcdefgh", "abcdexyz") == 63
        # 1 edit over 8 characters: 87.5 → 88
        assert similarity("quantity", "quantitx") == 88


class TestBuildMapping:

    def test_near_duplicates_collapse_to_first_seen(self):
        mapping = build_column_mapping([["Unit Price", "Name"], ["unit_prices", "name"]])
        assert mapping == {
            "unit_price": "unit_price",
            "name": "name",
            "unit_prices": "unit_price",
        }

    def test_distinct_headers_stay_distinct(self):
        mapping = build_column_mapping([["area", "floor", "price"]])
        assert mapping == {"area": "area", "floor": "floor", "price": "price"}

    def test_first_match_wins_over_best_match(self):
        # the two keys score 60 against each other; the third header scores 70 against the
        # first key and 90 against the second, and must join the first.
        matcher = ColumnMatcher(threshold=70)
        mapping = matcher.build_mapping([["aaaaaaaaaa", "aaaaaabbbb", "aaaaaaabbb"]])
        assert mapping["aaaaaabbbb"] == "aaaaaabbbb"
        assert mapping["aaaaaaabbb"] == "aaaaaaaaaa"

    def test_order_sensitive_and_deterministic(self):
        lists = [["customer_name", "customer_nme"], ["customer_names"]]
        first = build_column_mapping(lists)
        assert first == build_column_mapping(lists)
        assert first["customer_nme"] == "customer_name"
        assert first["customer_names"] == "customer_name"

    def test_chained_headers_do_not_transitively_merge(self):
        # b is close to a, c is close to b but not to a
        mapping = build_column_mapping([["abcdefghij"], ["abcdefghiX"], ["abcdefghXY"]], threshold=90)
        assert mapping["abcdefghix"] == "abcdefghij"
        assert mapping["abcdefghxy"] == "abcdefghxy"

    def test_threshold_from_config(self):
        from tablesplit.detection import DetectionConfig

        loose = ColumnMatcher(cfg=DetectionConfig(similarity_threshold=50))
        assert loose.threshold == 50
        assert loose.build_mapping([["price", "prices", "prize"]])["prize"] == "price"

    def test_empty_input(self):
        assert build_column_mapping([]) == {}
        assert build_column_mapping([[], []]) == {}

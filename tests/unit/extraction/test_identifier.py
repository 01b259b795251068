# tests/unit/extraction/test_identifier.py â v1
"""Tests for extraction/identifier.py â RUT/C.I. detection and normalization."""

from __future__ import annotations

import pytest

from rutrenamer.extraction.identifier import (
    extract_identifier,
    find_candidate,
    normalize_identifier,
)


class TestLabelPattern:
    def test_ci_label_with_dots(self):
        assert extract_identifier("C.I. 1.234.567-8 ") == "1234567"

    def test_label_wins_over_dashed_number(self):
        text = "RUT 21.000.111-2 ... C.I. 3.333.333-3"
        assert extract_identifier(text) == "3333333"

    def test_label_capture_keeps_non_digits_before_normalization(self):
        assert find_candidate("C.I. 1.234.567-8") == "1.234.567"

    def test_label_without_digits_means_not_found(self):
        # No fall-through to the later patterns once the label matched
        assert extract_identifier("C.I. pendiente - 12345678-9") is None

    def test_label_needs_terminating_dash(self):
        assert find_candidate("C.I. sin guion") is None


class TestDashedPattern:
    def test_hyphen_check_digit(self):
        assert extract_identifier("...ref 12345678-9 more...") == "12345678"

    def test_en_dash_and_k(self):
        assert extract_identifier("RUT 1234567âK vigente") == "1234567"

    def test_lowercase_k(self):
        assert extract_identifier("nro 987654321-k") == "987654321"

    def test_check_character_dropped(self):
        assert find_candidate("12345678-9") == "12345678"

    def test_too_short_body_falls_back(self):
        assert extract_identifier("123456-7") is None


class TestBareNumberPattern:
    def test_seven_digits(self):
        assert extract_identifier("doc no. 7654321 x") == "7654321"

    def test_eight_digits(self):
        assert extract_identifier("padron 12345678 fin") == "12345678"

    def test_nine_digits_not_bare(self):
        assert extract_identifier("ticket 123456789 ok") is None

    def test_embedded_in_longer_number(self):
        assert extract_identifier("0001234567890") is None


class TestAsciiDigitsOnly:
    def test_full_width_bare_number(self):
        assert extract_identifier("doc １２３４５６７ x") is None

    def test_full_width_dashed(self):
        assert find_candidate("RUT １２３４５６７８-9") is None

    def test_full_width_stripped_from_label(self):
        assert normalize_identifier("１.234.567") == "234567"


class TestNoMatch:
    @pytest.mark.parametrize("text", ["", "   ", "nothing to see", "tel 099 123 456"])
    def test_returns_none(self, text):
        assert extract_identifier(text) is None


class TestNormalize:
    def test_strips_non_digits(self):
        assert normalize_identifier(" 1.234.567 ") == "1234567"

    def test_empty_is_none(self):
        assert normalize_identifier("abc") is None

    def test_none_passthrough(self):
        assert normalize_identifier(None) is None

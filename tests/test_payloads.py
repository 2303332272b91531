# Area: FSM Tests
# PRD: docs/prd-drawturn.md
"""Tests for inbound payload validation and text helpers."""

import pytest

from conftest import PNG_DATA_URL
from drawturn._fsm.payloads import (
    BLANK_DRAWING,
    ErrorReport,
    SelectWord,
    SubmitDrawing,
    SubmitGuess,
    mask_word,
    normalize_text,
    parse_payload,
)
from drawturn.errors import ValidationError


class TestParsePayload:
    """Tests for parse_payload."""

    def test_valid_guess(self):
        assert parse_payload(SubmitGuess, {"guess": "gato"}).guess == "gato"

    def test_missing_field_lists_problem(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_payload(SelectWord, {}, room_id="r1")
        assert exc_info.value.room_id == "r1"
        assert any(p.startswith("word") for p in exc_info.value.problems)

    def test_none_payload_is_treated_as_empty(self):
        with pytest.raises(ValidationError):
            parse_payload(SubmitGuess, None)

    def test_error_report_has_defaults(self):
        report = parse_payload(ErrorReport, None)
        assert report.code == "GAME_STATE_ERROR"


class TestSubmitDrawing:
    """Tests for image reference validation."""

    @pytest.mark.parametrize("image_ref", [
        PNG_DATA_URL,
        BLANK_DRAWING,
        "https://cdn.example.com/drawings/42.png",
    ])
    def test_accepts_data_and_http_urls(self, image_ref):
        assert parse_payload(SubmitDrawing, {"image_ref": image_ref}).image_ref == image_ref

    @pytest.mark.parametrize("image_ref", [
        "",
        "ftp://example.com/a.png",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,",
        "data:image/png;base64,@@@",
    ])
    def test_rejects_malformed_images(self, image_ref):
        with pytest.raises(ValidationError):
            parse_payload(SubmitDrawing, {"image_ref": image_ref})


class TestTextHelpers:
    """Tests for normalize_text and mask_word."""

    def test_normalize_strips_accents_and_case(self):
        assert normalize_text("  Canción ") == "cancion"

    def test_normalize_collapses_inner_whitespace(self):
        assert normalize_text("ice   cream") == "ice cream"

    def test_mask_keeps_spaces_and_hyphens(self):
        assert mask_word("ice cream") == "___ _____"
        assert mask_word("t-rex") == "_-___"

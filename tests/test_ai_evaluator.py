# Area: Ports Tests
# PRD: docs/prd-drawturn.md
"""Tests for the Claude drawing evaluator and its use at the end of guessing."""

import threading
from unittest.mock import MagicMock

import pytest

from conftest import PNG_DATA_URL
from drawturn._fsm.enums import GameState
from drawturn.ai_evaluator import AnthropicDrawingEvaluator, image_block, parse_verdict


def fake_client(reply_text):
    client = MagicMock()
    client.messages.create.return_value = MagicMock(content=[MagicMock(text=reply_text)])
    return client


class TestAnthropicDrawingEvaluator:
    """Tests for AnthropicDrawingEvaluator with a mocked client."""

    def test_returns_parsed_verdict(self):
        client = fake_client('{"is_correct": true, "justification": "Clearly a cat."}')
        evaluator = AnthropicDrawingEvaluator(client=client)

        result = evaluator.evaluate_drawing(PNG_DATA_URL, "cat")

        assert result == {"is_correct": True, "justification": "Clearly a cat."}

    def test_sends_image_and_word(self):
        client = fake_client('{"is_correct": false}')
        evaluator = AnthropicDrawingEvaluator(model="claude-test", client=client)

        evaluator.evaluate_drawing("https://x/1.png", "giraffe")

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        content = kwargs["messages"][0]["content"]
        assert content[0]["source"] == {"type": "url", "url": "https://x/1.png"}
        assert "giraffe" in content[1]["text"]

    def test_api_errors_propagate(self):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("overloaded")
        evaluator = AnthropicDrawingEvaluator(client=client)
        with pytest.raises(RuntimeError):
            evaluator.evaluate_drawing(PNG_DATA_URL, "cat")


class TestHelpers:
    """Tests for image_block and parse_verdict."""

    def test_data_url_becomes_base64_block(self):
        block = image_block(PNG_DATA_URL)
        assert block["source"]["type"] == "base64"
        assert block["source"]["media_type"] == "image/png"
        assert block["source"]["data"].startswith("iVBOR")

    def test_verdict_inside_prose(self):
        text = 'Sure. {"is_correct": false, "justification": "Looks like a dog."} Done.'
        assert parse_verdict(text)["is_correct"] is False

    @pytest.mark.parametrize("text", ["", "no json here", '{"is_correct": "yes"}'])
    def test_bad_replies_raise(self, text):
        with pytest.raises(ValueError):
            parse_verdict(text)


class TestEvaluationAtRoundEnd:
    """The evaluator runs once when guessing ends and never affects scores."""

    def test_verdict_is_recorded(self, make_harness):
        evaluator = MagicMock()
        evaluator.evaluate_drawing.return_value = {"is_correct": True, "justification": "ok"}
        h = make_harness(ai_evaluator=evaluator)
        h.to_guessing("gato")

        h.expire()

        session = h.session
        assert session.current_state == GameState.ROUND_END
        assert session.last_ai_evaluation.status == "ok"
        assert session.last_ai_evaluation.is_correct is True
        assert session.last_ai_evaluation.round == 1
        evaluator.evaluate_drawing.assert_called_once_with(PNG_DATA_URL, "gato")

    def test_failure_marks_unavailable(self, make_harness):
        evaluator = MagicMock()
        evaluator.evaluate_drawing.side_effect = ConnectionError("down")
        h = make_harness(ai_evaluator=evaluator)
        h.to_guessing()
        scores_before = dict(h.session.scores)

        h.expire()

        session = h.session
        assert session.current_state == GameState.ROUND_END
        assert session.last_ai_evaluation.status == "unavailable"
        assert session.scores == scores_before

    def test_malformed_result_marks_unavailable(self, make_harness):
        evaluator = MagicMock()
        evaluator.evaluate_drawing.return_value = {"verdict": "maybe"}
        h = make_harness(ai_evaluator=evaluator)
        h.to_guessing()

        h.expire()

        assert h.session.last_ai_evaluation.status == "unavailable"

    def test_slow_evaluator_times_out(self, make_harness):
        release = threading.Event()
        evaluator = MagicMock()
        evaluator.evaluate_drawing.side_effect = lambda image, word: release.wait(2)
        h = make_harness({"ai_evaluation_timeout_seconds": 0.05}, ai_evaluator=evaluator)
        h.to_guessing()
        try:
            h.expire()
        finally:
            release.set()

        assert h.session.current_state == GameState.ROUND_END
        assert h.session.last_ai_evaluation.status == "unavailable"

    def test_no_evaluator_leaves_field_empty(self, harness):
        harness.to_guessing()
        harness.expire()
        assert harness.session.last_ai_evaluation is None

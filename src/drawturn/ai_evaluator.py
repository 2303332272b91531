# Area: Ports
# PRD: docs/prd-drawturn.md
"""
drawturn.ai_evaluator — Claude-backed drawing evaluator
=======================================================

An AIEvaluator that shows the round's drawing and the secret word to
Claude and asks whether the drawing depicts the word. The verdict is
advisory only; it is stored on the session and never changes scores.

Requires the ``llm`` extra:

    pip install drawturn-engine[llm]

Usage:
    from drawturn import GameEngine
    from drawturn.ai_evaluator import AnthropicDrawingEvaluator

    engine = GameEngine(..., ai_evaluator=AnthropicDrawingEvaluator())
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from .ports import AIEvaluator
from .types import AIEvaluationResult

logger = logging.getLogger("drawturn.ai_evaluator")

DEFAULT_MODEL = "claude-3-5-haiku-latest"
DEFAULT_MAX_TOKENS = 300

PROMPT = (
    "You are judging a drawing from a drawing-and-guessing game.\n"
    "The player was asked to draw: \"{word}\".\n"
    "Decide whether the drawing recognizably depicts that word.\n"
    "Answer with JSON only, in this exact shape:\n"
    "{{\"is_correct\": true or false, \"justification\": \"one short sentence\"}}"
)

_DATA_URL = re.compile(r"^data:(?P<media>image/[a-z+]+);base64,(?P<data>.+)$", re.DOTALL)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class AnthropicDrawingEvaluator(AIEvaluator):
    """
    AIEvaluator using the Anthropic Messages API.

    Any API or parsing failure is raised; the engine records the
    evaluation as unavailable and carries on.
    """

    def __init__(self, model: str = DEFAULT_MODEL, max_tokens: int = DEFAULT_MAX_TOKENS,
                 client: Optional[Any] = None):
        """
        Initialize the evaluator.

        Args:
            model: Claude model name
            max_tokens: Response token limit
            client: Pre-built anthropic client; by default one is created
                from the ANTHROPIC_API_KEY environment variable
        """
        self.model = model
        self.max_tokens = max_tokens
        if client is None:
            from anthropic import Anthropic
            client = Anthropic()
        self._client = client

    def evaluate_drawing(self, image_ref: str, word: str) -> AIEvaluationResult:
        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{
                "role": "user",
                "content": [
                    image_block(image_ref),
                    {"type": "text", "text": PROMPT.format(word=word)},
                ],
            }],
        )
        text = response.content[0].text if response.content else ""
        result = parse_verdict(text)
        logger.debug(f"AI verdict for '{word}': {result['is_correct']}")
        return result


def image_block(image_ref: str) -> Dict[str, Any]:
    """Build the Messages API image block for a data URL or an http(s) URL."""
    match = _DATA_URL.match(image_ref)
    if match:
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": match.group("media"),
                "data": match.group("data"),
            },
        }
    return {"type": "image", "source": {"type": "url", "url": image_ref}}


def parse_verdict(text: str) -> AIEvaluationResult:
    """
    Extract {"is_correct", "justification"} from the model's reply.

    Raises:
        ValueError: If the reply holds no JSON object with a boolean
            is_correct
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise ValueError(f"No JSON object in evaluator reply: {text!r}")
    data = json.loads(match.group(0))
    if not isinstance(data.get("is_correct"), bool):
        raise ValueError(f"Evaluator reply lacks a boolean is_correct: {data!r}")
    return {
        "is_correct": data["is_correct"],
        "justification": str(data.get("justification", "")),
    }

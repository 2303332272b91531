# Area: FSM
# PRD: docs/prd-drawturn.md
"""
drawturn._fsm.payloads — Inbound payload validation
===================================================

pydantic models for the payloads that carry user input. Failures are
converted into ``drawturn.errors.ValidationError`` with one problem line
per pydantic error.
"""

from __future__ import annotations
import base64
import binascii
import re
import unicodedata
from typing import Any, Dict, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, field_validator

from ..errors import ValidationError

# 1x1 transparent PNG used when the drawer runs out of time
BLANK_DRAWING = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

_DATA_URL = re.compile(r"^data:image/(png|jpeg|jpg|gif|webp);base64,(?P<data>[A-Za-z0-9+/=\s]+)$")
_HTTP_URL = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

M = TypeVar("M", bound=BaseModel)


class SelectWord(BaseModel):
    word: str

    @field_validator("word")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("word must not be blank")
        return value


class SubmitDrawing(BaseModel):
    image_ref: str

    @field_validator("image_ref")
    @classmethod
    def _well_formed(cls, value: str) -> str:
        value = value.strip()
        if _HTTP_URL.match(value):
            return value
        match = _DATA_URL.match(value)
        if not match:
            raise ValueError("image_ref must be an image data URL or an http(s) URL")
        try:
            raw = base64.b64decode(match.group("data"), validate=False)
        except (binascii.Error, ValueError):
            raise ValueError("image_ref carries invalid base64 data")
        if not raw:
            raise ValueError("image_ref carries no image data")
        return value


class SubmitGuess(BaseModel):
    guess: str

    @field_validator("guess")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("guess must not be blank")
        return value


class ErrorReport(BaseModel):
    message: str = "An error occurred in the game."
    code: str = "GAME_STATE_ERROR"


def parse_payload(model: Type[M], payload: Optional[Dict[str, Any]],
                  room_id: Optional[str] = None) -> M:
    """Validate a raw payload dict against ``model``."""
    try:
        return model.model_validate(payload or {})
    except pydantic.ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationError(
            f"Invalid {model.__name__} payload",
            room_id=room_id,
            problems=problems,
        ) from None


def normalize_text(text: str) -> str:
    """Lower-case, strip diacritics and surrounding whitespace."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.split())


def mask_word(word: str) -> str:
    """Replace every letter with '_' keeping spaces and hyphens."""
    return "".join(ch if ch in " -" else "_" for ch in word)

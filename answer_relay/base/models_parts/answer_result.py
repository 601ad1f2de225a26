"""Terminal result of one successful answer call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..kinds import Mode


@dataclass(frozen=True)
class AnswerResult:
    """Generated answer text and the mode it was produced for."""

    text: str
    mode: Mode

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "mode": self.mode.value}


__all__ = ["AnswerResult"]

"""
Request model consumed once by the answer service.

A ``Request`` is built by the foreground collaborator (selection capture and
page-context heuristics live outside this package) and is immutable from then
on.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .image_refs import ImageRefs
from ..kinds import Mode


@dataclass(frozen=True)
class Request:
    """User question plus prompt instructions.

    Attributes:
        question_text: Highlighted text (possibly enriched with options).
        custom_prompt: Instructions prepended to the question.
        mode: ``Mode.QA`` for short option answers, ``Mode.CODING`` for long
            form output.
        images: Optional image references merged into the prompt text.
    """

    question_text: str
    custom_prompt: str = ""
    mode: Mode = Mode.QA
    images: Optional[ImageRefs] = None

    def has_images(self) -> bool:
        return self.images is not None and not self.images.is_empty()

    def has_content(self) -> bool:
        """Return True when there is question text or at least one image."""
        return bool((self.question_text or "").strip()) or self.has_images()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionText": self.question_text,
            "customPrompt": self.custom_prompt,
            "mode": self.mode.value,
            "images": self.images.to_dict() if self.images else None,
        }


__all__ = ["Request"]

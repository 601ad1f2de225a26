"""
Image references found next to a question.

Images are never transmitted to a backend; their URLs are interleaved into the
prompt text by :func:`answer_relay.base.prompt.build_prompt`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .option_image import OptionImage


@dataclass(frozen=True)
class ImageRefs:
    """Question image and option images captured by the foreground agent.

    Attributes:
        question_image: Optional URL of the image carrying the question.
        option_images: Ordered option images (label + URL).
    """

    question_image: Optional[str] = None
    option_images: Tuple[OptionImage, ...] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        """Return True when neither a question image nor option images exist."""
        return not self.question_image and not self.option_images

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionImage": self.question_image,
            "optionImages": [img.to_dict() for img in self.option_images],
        }


__all__ = ["ImageRefs"]

"""Option image reference attached to an image-based question."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class OptionImage:
    """One answer option rendered as an image.

    Attributes:
        option: Option label as shown on the page (``"A"``, ``"2"``).
        src: Image URL.
    """

    option: str
    src: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["OptionImage"]

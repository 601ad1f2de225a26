"""Prompt assembly, generation profiles and answer cleanup.

Images are referenced by URL text inside the prompt; nothing binary or
multimodal is ever sent to a backend.
"""
from __future__ import annotations

import re
from typing import Any, Dict

from .kinds import Mode, ProviderKind
from .models_parts.request import Request

DEFAULT_PROMPT = (
    'Give the option letter/number followed by the answer text. '
    'Format as "A: [answer]" or "1: [answer]". Be extremely concise.'
)
IMAGE_BASED_PROMPT = (
    "This is an image-based question. Look at the question image and option images carefully. "
    "Give the correct option letter/number followed by a brief description. "
    'Format as "A: [brief description]" or "1: [brief description]". Be extremely concise.'
)

# Gemini generationConfig per mode
_GEMINI_PROFILES: Dict[Mode, Dict[str, Any]] = {
    Mode.QA: {"temperature": 0.2, "topK": 20, "topP": 0.8, "maxOutputTokens": 300},
    Mode.CODING: {"temperature": 0.4, "topK": 40, "topP": 0.95, "maxOutputTokens": 2048},
}

# Chat-completions sampling per mode
_CHAT_PROFILES: Dict[Mode, Dict[str, Any]] = {
    Mode.QA: {"temperature": 0.2, "max_tokens": 300},
    Mode.CODING: {"temperature": 0.4, "max_tokens": 2048},
}

_ANSWER_PREFIX = re.compile(r"^(Option|Answer|The answer is|It's)\b\s*:?\s*", re.IGNORECASE)
_OPTION_LINE = re.compile(r"^\s*([A-D0-9])\s*[:).\-]\s*(.+)$", re.IGNORECASE)


def default_prompt_for(request: Request) -> str:
    """Pick the built-in prompt matching the request shape."""
    return IMAGE_BASED_PROMPT if request.has_images() else DEFAULT_PROMPT


def _question_block(request: Request) -> str:
    text = request.question_text or ""
    if not request.has_images():
        return text
    images = request.images
    block = "Image-based question:\n"
    if images.question_image:
        block += f"Question Image: {images.question_image}\n\n"
    if images.option_images:
        block += "Options:\n" + "\n".join(f"{img.option}: {img.src}" for img in images.option_images) + "\n\n"
    if text.strip():
        block += f"Additional Text: {text}\n"
    return block


def build_prompt(request: Request) -> str:
    """Concatenate prompt instructions, image references and question text."""
    instructions = request.custom_prompt or default_prompt_for(request)
    return f"{instructions}\n\nQuestion to analyze:\n{_question_block(request)}"


def generation_profile(provider: ProviderKind, mode: Mode) -> Dict[str, Any]:
    """Return a copy of the sampling parameters for ``provider`` and ``mode``.

    ``coding`` gets a looser, larger-output profile; everything else the tight
    short-answer profile.
    """
    table = _GEMINI_PROFILES if provider is ProviderKind.GEMINI else _CHAT_PROFILES
    return dict(table.get(mode, table[Mode.QA]))


def format_answer(answer: str) -> str:
    """Normalize short option answers to ``"A: text"``.

    Strips a leading ``Option``/``Answer``/``The answer is``/``It's`` prefix and
    rewrites ``A) x``, ``A. x`` or ``A - x`` forms. Multi-line answers are only
    prefix-stripped.
    """
    if not answer:
        return ""
    text = _ANSWER_PREFIX.sub("", answer.strip(), count=1).strip()
    match = _OPTION_LINE.fullmatch(text) if "\n" not in text else None
    if match:
        text = f"{match.group(1)}: {match.group(2)}"
    return text.strip()


__all__ = [
    "DEFAULT_PROMPT",
    "IMAGE_BASED_PROMPT",
    "default_prompt_for",
    "build_prompt",
    "generation_profile",
    "format_answer",
]

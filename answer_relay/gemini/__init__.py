"""
Gemini backend package.

Exports:
- GeminiClient: fixed-format client for the generateContent API
"""

from .client import GeminiClient, build_generate_content_body

__all__ = ["GeminiClient", "build_generate_content_body"]

"""
ChatGPT backend package.

Exports:
- ChatGPTClient: fixed-format client for the OpenAI Chat Completions API
"""

from .client import ChatGPTClient, build_chat_body

__all__ = ["ChatGPTClient", "build_chat_body"]

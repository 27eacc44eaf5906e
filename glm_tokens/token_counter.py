"""
Token Counter - Public entry points dem token cho GLM.

    count = await count_raw("Hello, world!")
    count = await count_chat([
        ChatMessage.system("You are a helpful assistant."),
        ChatMessage.user("Hello, world!"),
    ])

Tat ca deu la coroutine: encode/render chay tren worker pool, caller chi
suspend tai diem await. Loi luon la TokenizationError, TemplateRenderError
hoac ExecutionError (deu la TokenCountError).
"""

from typing import List, Sequence

from glm_tokens.core.tokenization.types import ChatMessage
from glm_tokens.services.encoder_registry import get_tokenization_service


async def count_raw(text: str) -> int:
    """
    Dem token cua text thuan (khong chat template, khong special tokens).

    Args:
        text: Text can dem

    Returns:
        So luong tokens
    """
    return await get_tokenization_service().count_raw(text)


async def count_chat(messages: Sequence[ChatMessage]) -> int:
    """
    Dem token cua messages sau khi ap chat template (co generation prompt).

    Args:
        messages: Danh sach ChatMessage theo thu tu

    Returns:
        So luong tokens cua prompt da render
    """
    return await get_tokenization_service().count_chat(messages)


async def count_raw_batch(texts: Sequence[str]) -> List[int]:
    """Dem token cho nhieu text trong mot task tren worker pool."""
    return await get_tokenization_service().count_raw_batch(texts)


async def render_chat(messages: Sequence[ChatMessage]) -> str:
    """Prompt text chinh xac ma count_chat() dem."""
    return await get_tokenization_service().render_chat(messages)

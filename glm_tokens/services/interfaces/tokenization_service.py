"""
ITokenizationService - Interface cho dich vu dem token.

Dinh nghia contract ma bat ky TokenizationService nao cung phai tuan theo.
Cho phep dependency injection va testability (mock/stub).

Methods:
- count_raw(): Dem token trong text (khong chat template)
- count_chat(): Dem token cua messages sau khi render chat template
- count_raw_batch(): Dem token cho nhieu text mot lan
- render_chat(): Tra ve prompt text da render
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from glm_tokens.core.tokenization.types import ChatMessage


class ITokenizationService(ABC):
    """
    Interface cho dich vu tokenization.

    Moi implementation phai dam bao:
    - Khong block event loop cua caller (CPU work chay tren worker pool)
    - Moi loi la mot trong TokenizationError / TemplateRenderError / ExecutionError
    - Khong retry, khong fallback uoc luong
    """

    @abstractmethod
    async def count_raw(self, text: str) -> int:
        """
        Dem so token trong mot doan text.

        Args:
            text: Doan text can dem token

        Returns:
            So luong tokens (>= 0)
        """
        ...

    @abstractmethod
    async def count_chat(self, messages: Sequence[ChatMessage]) -> int:
        """
        Dem so token cua messages sau khi render chat template
        (add_generation_prompt=True).

        Loi template duoc raise truoc, khong encode.

        Args:
            messages: Danh sach ChatMessage theo thu tu

        Returns:
            So luong tokens cua prompt da render
        """
        ...

    @abstractmethod
    async def count_raw_batch(self, texts: Sequence[str]) -> List[int]:
        """
        Dem token cho nhieu text trong mot task.

        Args:
            texts: Danh sach text

        Returns:
            So token tuong ung tung text, cung thu tu
        """
        ...

    @abstractmethod
    async def render_chat(self, messages: Sequence[ChatMessage]) -> str:
        """
        Render messages thanh prompt text chinh xac ma model nhan duoc.

        Args:
            messages: Danh sach ChatMessage theo thu tu

        Returns:
            Prompt text
        """
        ...

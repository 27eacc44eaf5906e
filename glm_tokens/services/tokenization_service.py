"""
TokenizationService - Concrete implementation cua ITokenizationService.

Ghep ba thanh phan core:
  TokenizerResource (encode)  +  ChatTemplateRenderer (render)  +  OffloadExecutor

Moi phep dem la MOT unit of work submit len worker pool:
- count_raw:  encode(text)
- count_chat: render(messages, add_generation_prompt=True) -> encode(prompt)

Dependency Flow:
  encoder_registry -> TokenizationService -> core.tokenization.resource
                                          -> core.tokenization.template
                                          -> core.utils.threading_utils
"""

from typing import List, Optional, Sequence

from glm_tokens.core.errors import TemplateRenderError, TokenizationError
from glm_tokens.core.logging_config import log_debug
from glm_tokens.core.tokenization.resource import (
    TokenizerResource,
    get_tokenizer_resource,
)
from glm_tokens.core.tokenization.template import (
    GLM_CHAT_TEMPLATE,
    ChatTemplateRenderer,
)
from glm_tokens.core.tokenization.types import ChatMessage
from glm_tokens.core.utils.threading_utils import (
    OffloadExecutor,
    get_offload_executor,
)
from glm_tokens.services.interfaces.tokenization_service import ITokenizationService


class TokenizationService(ITokenizationService):
    """
    Dich vu dem token - async, khong block event loop.

    Tokenizer va renderer mac dinh la singleton cua process; executor mac dinh
    la global offload executor (resolve lai moi lan goi de theo kip shutdown).
    """

    def __init__(
        self,
        tokenizer: Optional[TokenizerResource] = None,
        renderer: Optional[ChatTemplateRenderer] = None,
        executor: Optional[OffloadExecutor] = None,
    ) -> None:
        """
        Khoi tao TokenizationService.

        Args:
            tokenizer: TokenizerResource (None = singleton cua model mac dinh)
            renderer: ChatTemplateRenderer (None = chat template dong goi)
            executor: OffloadExecutor (None = global executor)
        """
        if tokenizer is None:
            tokenizer = get_tokenizer_resource()
        self._tokenizer = tokenizer
        self._renderer = renderer if renderer is not None else GLM_CHAT_TEMPLATE
        self._executor = executor

    @property
    def executor(self) -> OffloadExecutor:
        if self._executor is not None:
            return self._executor
        return get_offload_executor()

    # ================================================================
    # Public API - ITokenizationService contract
    # ================================================================

    async def count_raw(self, text: str) -> int:
        return await self.executor.submit(lambda: self._tokenizer.encode(text))

    async def count_chat(self, messages: Sequence[ChatMessage]) -> int:
        # Copy truoc khi offload: caller co the sua list trong luc work cho
        try:
            snapshot = tuple(messages)
        except TypeError as e:
            raise TemplateRenderError(e) from e

        def work() -> int:
            prompt = self._renderer.render(snapshot, add_generation_prompt=True)
            log_debug(
                f"[TokenizationService] Rendered {len(snapshot)} messages "
                f"-> {len(prompt)} chars"
            )
            return self._tokenizer.encode(prompt)

        return await self.executor.submit(work)

    async def count_raw_batch(self, texts: Sequence[str]) -> List[int]:
        try:
            snapshot = list(texts)
        except TypeError as e:
            raise TokenizationError(e) from e
        return await self.executor.submit(
            lambda: self._tokenizer.encode_batch(snapshot)
        )

    async def render_chat(self, messages: Sequence[ChatMessage]) -> str:
        try:
            snapshot = tuple(messages)
        except TypeError as e:
            raise TemplateRenderError(e) from e
        return await self.executor.submit(
            lambda: self._renderer.render(snapshot, add_generation_prompt=True)
        )

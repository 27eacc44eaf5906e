"""
glm-tokens - Dem token GLM cho text va chat transcript, khong goi model.
"""

from glm_tokens.core.assets import asset_digest
from glm_tokens.core.errors import (
    ErrorKind,
    ExecutionError,
    TemplateRenderError,
    TokenCountError,
    TokenizationError,
)
from glm_tokens.core.tokenization.types import ChatMessage
from glm_tokens.core.utils.threading_utils import shutdown_offload_executor
from glm_tokens.token_counter import (
    count_chat,
    count_raw,
    count_raw_batch,
    render_chat,
)

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "ErrorKind",
    "ExecutionError",
    "TemplateRenderError",
    "TokenCountError",
    "TokenizationError",
    "asset_digest",
    "count_chat",
    "count_raw",
    "count_raw_batch",
    "render_chat",
    "shutdown_offload_executor",
]

"""
Encoder Registry - Provider cho TokenizationService.

Module nay la single access point cho TokenizationService instance
dung chung toan process.

Functions:
- get_tokenization_service(): Lay TokenizationService singleton
"""

import threading
from typing import Optional

from glm_tokens.services.interfaces.tokenization_service import ITokenizationService
from glm_tokens.services.tokenization_service import TokenizationService

# TokenizationService singleton instance (thread-safe)
_service_instance: Optional[TokenizationService] = None
_service_lock = threading.Lock()


def get_tokenization_service() -> ITokenizationService:
    """
    Lay TokenizationService singleton instance.

    Thread-safe lazy initialization.
    Day la entry point chinh cho token_counter.

    Returns:
        ITokenizationService instance
    """
    global _service_instance
    if _service_instance is not None:
        return _service_instance

    with _service_lock:
        if _service_instance is None:
            _service_instance = TokenizationService()
        return _service_instance

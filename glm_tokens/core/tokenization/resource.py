"""
Tokenizer Resource - Tokenizer singleton cho token counting.

Tokenizer (Hugging Face tokenizers, Rust backend) duoc build tu asset bytes
dung MOT lan moi process, lan dau tien co caller can den. Sau do chi doc,
khong lock.

Classes:
- LazyResource: Slot khoi tao lazy, thread-safe, nho ca ket qua loi
- TokenizerResource: Build tokenizer tu bytes + encode() tra ve so token

Functions:
- get_tokenizer_resource(): Lay TokenizerResource singleton cua model mac dinh
"""

import copy
import threading
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from tokenizers import Tokenizer

from glm_tokens.core.assets import tokenizer_config_bytes
from glm_tokens.core.errors import TokenizationError
from glm_tokens.core.logging_config import log_debug, log_error, log_info

T = TypeVar("T")


class LazyResource(Generic[T]):
    """
    Slot build-once: factory chi chay mot lan, du nhieu thread goi dong thoi.

    - Thanh cong: moi lan get() sau do tra ve cung mot value (fast path, khong lock)
    - That bai (Exception): loi duoc luu lai, moi caller dang cho va goi sau deu
      nhan mot ban sao moi cua loi do (cung cause). Khong retry.
    - BaseException (KeyboardInterrupt, SystemExit...) khong danh dau resolved,
      lan get() sau build lai.
    """

    def __init__(self, factory: Callable[[], T], name: str = "resource"):
        self._factory = factory
        self._name = name
        self._lock = threading.Lock()
        self._resolved = False
        self._value: Optional[T] = None
        self._error: Optional[Exception] = None

    @property
    def is_resolved(self) -> bool:
        """True neu lan build duy nhat da xay ra (thanh cong hoac that bai)."""
        return self._resolved

    def get(self) -> T:
        # Fast path: da resolve (khong can lock)
        if not self._resolved:
            with self._lock:
                # Double-check sau khi lay lock
                if not self._resolved:
                    self._build()

        error = self._error
        if error is not None:
            # Raise ban sao: loi luu trong slot khong bi gan them traceback
            raise copy.copy(error).with_traceback(None) from error.__cause__
        return self._value  # type: ignore[return-value]

    def _build(self) -> None:
        log_debug(f"[LazyResource] Building {self._name}")
        try:
            value = self._factory()
        except Exception as e:
            self._error = e
        else:
            self._value = value
        self._resolved = True


class TokenizerResource:
    """
    Tokenizer dung chung toan process.

    Build tu tokenizer config bytes o lan encode() dau tien.
    Asset hong -> moi lan encode() deu raise TokenizationError voi cung nguyen nhan.
    """

    def __init__(
        self,
        config_bytes: Callable[[], bytes] = tokenizer_config_bytes,
        name: str = "tokenizer",
    ):
        self._config_bytes = config_bytes
        self._name = name
        self._slot: LazyResource[Tokenizer] = LazyResource(self._build, name=name)

    @property
    def is_initialized(self) -> bool:
        return self._slot.is_resolved

    @property
    def tokenizer(self) -> Tokenizer:
        """
        Lay Tokenizer da build.

        Raises:
            TokenizationError: Neu build that bai (lan nay hoac lan truoc)
        """
        return self._slot.get()

    def encode(self, text: str) -> int:
        """
        Dem so token trong text (khong them special tokens).

        Args:
            text: Text can dem

        Returns:
            So luong tokens (>= 0)

        Raises:
            TokenizationError: Tokenizer khong build duoc hoac encode loi
        """
        tokenizer = self.tokenizer
        try:
            return len(tokenizer.encode(text, add_special_tokens=False).ids)
        except Exception as e:
            raise TokenizationError(e) from e

    def encode_batch(self, texts: Sequence[str]) -> List[int]:
        """
        Dem token cho nhieu text trong mot lan goi (Rust multi-thread).

        Args:
            texts: Danh sach text

        Returns:
            So token tuong ung voi tung text, cung thu tu
        """
        tokenizer = self.tokenizer
        if not texts:
            return []
        try:
            encodings = tokenizer.encode_batch(list(texts), add_special_tokens=False)
        except Exception as e:
            raise TokenizationError(e) from e
        return [len(encoding.ids) for encoding in encodings]

    def _build(self) -> Tokenizer:
        try:
            tokenizer = Tokenizer.from_buffer(self._config_bytes())
        except Exception as e:
            log_error(f"[TokenizerResource] Failed to build {self._name}", e)
            raise TokenizationError(e) from e

        log_info(
            f"[TokenizerResource] Loaded {self._name} "
            f"(vocab size {tokenizer.get_vocab_size(with_added_tokens=True)})"
        )
        return tokenizer


# Tokenizer singleton cua model mac dinh
GLM_TOKENIZER = TokenizerResource(name="glm-4.6 tokenizer")


def get_tokenizer_resource() -> TokenizerResource:
    """Lay TokenizerResource singleton (build lazy o lan encode dau tien)."""
    return GLM_TOKENIZER

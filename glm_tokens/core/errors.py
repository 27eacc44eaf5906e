"""
Error taxonomy cho token counting.

Moi loi tra ve cho caller thuoc dung mot trong ba loai:
- TokenizationError: encode text -> tokens that bai (ke ca khi build tokenizer loi)
- TemplateRenderError: parse/render chat template that bai
- ExecutionError: offload executor khong chay duoc hoac work ket thuc bat thuong

Caller phan biet bang isinstance() hoac thuoc tinh `kind`.
Nguyen nhan goc luon nam trong `cause` (va __cause__).
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Ba loai loi duy nhat ma public API co the raise."""

    TOKENIZATION = "tokenization"
    TEMPLATE = "template"
    EXECUTION = "execution"


class TokenCountError(Exception):
    """Base class - khong raise truc tiep, dung mot trong ba subclass."""

    kind: ErrorKind
    prefix: str = ""

    def __init__(self, cause: Optional[BaseException] = None, detail: str = ""):
        self.cause = cause
        self.detail = detail or (str(cause) if cause is not None else "")
        message = f"{self.prefix}: {self.detail}" if self.detail else self.prefix
        super().__init__(message)

    def __reduce__(self):
        # copy/pickle dung lai constructor args, khong phai message da format
        return (type(self), (self.cause, self.detail))


class TokenizationError(TokenCountError):
    kind = ErrorKind.TOKENIZATION
    prefix = "Failed to tokenize input"


class TemplateRenderError(TokenCountError):
    kind = ErrorKind.TEMPLATE
    prefix = "Failed to render chat template"


class ExecutionError(TokenCountError):
    kind = ErrorKind.EXECUTION
    prefix = "Failed to run task on thread pool"

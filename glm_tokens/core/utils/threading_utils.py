"""
Threading Utilities - Offload CPU-bound work ra khoi event loop

Encode/render la CPU-bound, khong duoc chay tren thread cua asyncio loop.
OffloadExecutor chay work tren ThreadPoolExecutor rieng (so worker co dinh)
va tra ve awaitable cho caller.

- Gioi han so task dang cho (max_pending) -> vuot qua thi tu choi ngay
- Loi domain (TokenizationError, TemplateRenderError) di xuyen qua nguyen ven
- Loi bat thuong khac trong work -> ExecutionError
- Khong dam bao thu tu hoan thanh giua cac lan submit
"""

import asyncio
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from glm_tokens.config.runtime import OFFLOAD_MAX_PENDING, OFFLOAD_MAX_WORKERS
from glm_tokens.core.errors import ExecutionError, TokenCountError
from glm_tokens.core.logging_config import log_debug, log_error, log_info, log_warning

T = TypeVar("T")


class OffloadExecutor:
    """
    Bounded worker pool cho work dong bo, expose qua async submit().

    Usage:
        executor = OffloadExecutor(max_workers=4)
        count = await executor.submit(lambda: tokenizer.encode(text))

        # Khi process shutdown
        executor.shutdown()
    """

    def __init__(
        self,
        max_workers: int = OFFLOAD_MAX_WORKERS,
        max_pending: int = OFFLOAD_MAX_PENDING,
        thread_name_prefix: str = "glm-tokens",
    ):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._max_workers = max_workers
        self._max_pending = max_pending
        self._pending = 0
        self._closed = False
        self._lock = threading.Lock()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def pending(self) -> int:
        """So task da nhan nhung chua xong."""
        with self._lock:
            return self._pending

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    async def submit(self, work: Callable[[], T]) -> T:
        """
        Chay work tren worker thread va doi ket qua ma khong block event loop.

        Args:
            work: Function khong tham so, tra ve T hoac raise

        Returns:
            Ket qua cua work

        Raises:
            ExecutionError: Executor da shutdown, qua tai, hoac work ket thuc bat thuong
            TokenizationError, TemplateRenderError: Loi domain tu work
        """
        future = self._admit(work)
        try:
            return await asyncio.wrap_future(future)
        except asyncio.CancelledError:
            # Work bi huy do shutdown(cancel_futures) chu khong phai do caller
            if future.cancelled() and self._closed:
                raise ExecutionError(detail="work cancelled by executor shutdown")
            raise

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown executor; task chua bat dau se bi huy.

        Args:
            wait: Co doi task dang chay hoan thanh khong
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
        log_info("[OffloadExecutor] Shutting down worker pool")
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _admit(self, work: Callable[[], T]) -> "Future[T]":
        with self._lock:
            if self._closed:
                raise ExecutionError(detail="executor is shut down")
            if self._pending >= self._max_pending:
                log_warning(
                    f"[OffloadExecutor] Rejecting work: {self._pending} tasks pending "
                    f"(limit {self._max_pending})"
                )
                raise ExecutionError(
                    detail=f"worker pool exhausted ({self._max_pending} tasks pending)"
                )
            try:
                future = self._executor.submit(self._run, work)
            except RuntimeError as e:
                raise ExecutionError(e) from e
            self._pending += 1

        future.add_done_callback(self._release)
        return future

    def _release(self, _future: Future) -> None:
        with self._lock:
            self._pending -= 1

    @staticmethod
    def _run(work: Callable[[], T]) -> T:
        try:
            return work()
        except TokenCountError:
            raise
        except Exception as e:
            log_error("[OffloadExecutor] Work terminated abnormally", e)
            raise ExecutionError(e) from e


# Global offload executor
_global_executor: Optional[OffloadExecutor] = None
_executor_lock = threading.Lock()


def get_offload_executor() -> OffloadExecutor:
    """Lay global offload executor (singleton, tao lazy)."""
    global _global_executor
    if _global_executor is not None:
        return _global_executor

    with _executor_lock:
        if _global_executor is None:
            _global_executor = OffloadExecutor()
            log_debug(
                f"[OffloadExecutor] Created worker pool "
                f"(max_workers={_global_executor.max_workers})"
            )
        return _global_executor


def shutdown_offload_executor(wait: bool = False) -> None:
    """
    Shutdown global executor khi process ket thuc.
    Lan goi get_offload_executor() sau do se tao pool moi.
    """
    global _global_executor
    with _executor_lock:
        executor = _global_executor
        _global_executor = None
    if executor is not None:
        executor.shutdown(wait=wait)

"""
Runtime Configuration - Kich thuoc worker pool cho offload executor.

Doc tu environment variables mot lan luc import:
- GLM_TOKENS_MAX_WORKERS: so worker threads (mac dinh min(4, cpu_count))
- GLM_TOKENS_MAX_PENDING: so task dang cho toi da truoc khi tu choi
"""

import os
import warnings

MAX_WORKERS_ENV_VAR = "GLM_TOKENS_MAX_WORKERS"
MAX_PENDING_ENV_VAR = "GLM_TOKENS_MAX_PENDING"

DEFAULT_MAX_WORKERS = min(4, os.cpu_count() or 1)
DEFAULT_MAX_PENDING = 1024


def read_positive_int(env_var: str, default: int) -> int:
    """
    Doc so nguyen duong tu environment variable.

    Gia tri rong hoac khong hop le -> dung default (kem warning).

    Args:
        env_var: Ten bien moi truong
        default: Gia tri mac dinh

    Returns:
        So nguyen duong
    """
    raw = os.environ.get(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        warnings.warn(
            f"{env_var}={raw!r} is not a positive integer, using {default}",
            RuntimeWarning,
            stacklevel=2,
        )
        return default
    return value


OFFLOAD_MAX_WORKERS = read_positive_int(MAX_WORKERS_ENV_VAR, DEFAULT_MAX_WORKERS)
OFFLOAD_MAX_PENDING = read_positive_int(MAX_PENDING_ENV_VAR, DEFAULT_MAX_PENDING)

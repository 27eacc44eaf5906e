"""
Application Paths - Centralized path definitions cho glm-tokens

Module này định nghĩa các đường dẫn và biến môi trường sử dụng trong package.
Tập trung ở một nơi để tránh hardcode rải rác và đảm bảo consistency.

- assets/ : Tokenizer config + chat template vendor lúc build (package data);
            thiếu file thì asset provider tải từ Hugging Face Hub
- logs/   : Chỉ dùng khi GLM_TOKENS_LOG_DIR được set
"""

import os
from pathlib import Path
from typing import Optional


# =============================================================================
# Tên ứng dụng - Single source of truth cho naming
# =============================================================================
APP_NAME = "glm-tokens"

# =============================================================================
# Thư mục assets đóng gói cùng package (vendor lúc build)
# =============================================================================
ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

# =============================================================================
# Environment Variables
# =============================================================================
DEBUG_ENV_VAR = "GLM_TOKENS_DEBUG"
LOG_DIR_ENV_VAR = "GLM_TOKENS_LOG_DIR"

# Kiểm tra debug mode từ environment variable
DEBUG_MODE = os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")

# File logging chỉ bật khi caller chỉ định thư mục log
_log_dir_value = os.environ.get(LOG_DIR_ENV_VAR, "").strip()
LOG_DIR: Optional[Path] = Path(_log_dir_value).expanduser() if _log_dir_value else None


def get_asset_dir(name: str) -> Path:
    """
    Lấy đường dẫn thư mục asset của một model.

    Args:
        name: Tên thư mục con trong assets/ (vd: "glm-4.6")

    Returns:
        Path đến thư mục asset
    """
    return ASSETS_DIR / name

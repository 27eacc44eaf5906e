"""
Config Package - Chứa các constants và cấu hình của package

Bao gồm:
- paths: Thư mục assets, log dir, debug flag
- model_config: Model đóng gói và tên file asset
- runtime: Kích thước worker pool
"""

from glm_tokens.config.model_config import (
    ModelConfig,
    MODEL_CONFIGS,
    DEFAULT_MODEL_ID,
    get_model_by_id,
    get_default_model,
)

__all__ = [
    "ModelConfig",
    "MODEL_CONFIGS",
    "DEFAULT_MODEL_ID",
    "get_model_by_id",
    "get_default_model",
]

"""
Model Configuration - Định nghĩa model và các asset đi kèm

Mỗi model gắn với một Hugging Face repo chứa tokenizer config (tokenizer.json)
và chat template (Jinja). Asset có thể được vendor vào glm_tokens/assets/<model>/
lúc build (python -m glm_tokens.fetch_assets); nếu không có thì tải từ Hub.
Đổi asset là đổi kết quả đếm token.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

# Pin revision cua repo tren Hub (commit sha hoac branch)
ASSET_REVISION_ENV_VAR = "GLM_TOKENS_ASSET_REVISION"


@dataclass(frozen=True)
class ModelConfig:
    """
    Cấu hình cho một LLM model.

    Attributes:
        id: ID duy nhất của model (VD: "glm-4.6")
        name: Tên hiển thị (VD: "GLM 4.6")
        context_length: Kích thước context window (số tokens tối đa)
        asset_dir: Tên thư mục con trong glm_tokens/assets/
        tokenizer_repo: Hugging Face repo chứa tokenizer + chat template
        revision: Revision của tokenizer_repo (None = "main")
        tokenizer_file: Tên file tokenizer config trong repo / asset_dir
        chat_template_file: Tên file chat template trong repo / asset_dir
    """

    id: str
    name: str
    context_length: int
    asset_dir: str
    tokenizer_repo: str
    revision: Optional[str] = None
    tokenizer_file: str = "tokenizer.json"
    chat_template_file: str = "chat_template.jinja"


MODEL_CONFIGS: List[ModelConfig] = [
    ModelConfig(
        id="glm-4.6",
        name="GLM 4.6",
        context_length=200000,
        asset_dir="glm-4.6",
        tokenizer_repo="zai-org/GLM-4.6",
        revision=os.environ.get(ASSET_REVISION_ENV_VAR) or None,
    ),
]

# Model duoc dong goi mac dinh
DEFAULT_MODEL_ID = "glm-4.6"


def get_model_by_id(model_id: str) -> Optional[ModelConfig]:
    """
    Lấy model config theo ID.

    Args:
        model_id: ID của model cần tìm

    Returns:
        ModelConfig nếu tìm thấy, None nếu không
    """
    for model in MODEL_CONFIGS:
        if model.id == model_id:
            return model
    return None


def get_default_model() -> ModelConfig:
    """
    Lấy model config mặc định.

    Raises:
        LookupError: DEFAULT_MODEL_ID không có trong MODEL_CONFIGS
    """
    model = get_model_by_id(DEFAULT_MODEL_ID)
    if model is None:
        raise LookupError(f"Missing config for default model {DEFAULT_MODEL_ID!r}")
    return model

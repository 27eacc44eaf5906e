"""
Asset Provider - Tokenizer config va chat template cua model mac dinh.

Asset la file chinh thuc trong Hugging Face repo cua model (tokenizer.json +
chat_template.jinja). Thu tu tim:
1. glm_tokens/assets/<model>/ - vendor luc build bang fetch_assets(), cai dat
   nhu package data
2. Hugging Face Hub (hf_hub_download, dung chung cache voi Tokenizer.from_pretrained)

Doc mot lan roi memoize: moi lan goi tra ve cung mot object bat bien.
Loi tai/doc khong duoc memoize, lan goi sau se thu lai.

Functions:
- tokenizer_config_bytes(): Noi dung tokenizer.json (bytes)
- chat_template_source(): Noi dung chat template (str)
- asset_digest(): sha256 rut gon cua ca hai asset
- fetch_assets(): Tai asset vao thu muc package de dong goi offline
"""

import hashlib
import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from huggingface_hub import hf_hub_download
from huggingface_hub.errors import EntryNotFoundError

from glm_tokens.config.model_config import ModelConfig, get_default_model
from glm_tokens.config.paths import get_asset_dir
from glm_tokens.core.logging_config import log_info

# Repo cu chi khai bao chat template trong tokenizer_config.json
TOKENIZER_CONFIG_FILE = "tokenizer_config.json"


def _bundled_path(model: ModelConfig, filename: str) -> Optional[Path]:
    path = get_asset_dir(model.asset_dir) / filename
    return path if path.is_file() else None


def _download(model: ModelConfig, filename: str, local_dir: Optional[Path] = None) -> Path:
    log_info(f"[Assets] Fetching {filename} from {model.tokenizer_repo}")
    return Path(
        hf_hub_download(
            repo_id=model.tokenizer_repo,
            filename=filename,
            revision=model.revision,
            local_dir=local_dir,
        )
    )


def _template_from_tokenizer_config(raw: bytes) -> str:
    """Lay chat template tu tokenizer_config.json (str hoac list named templates)."""
    template = json.loads(raw).get("chat_template")
    if isinstance(template, list):
        named = {t.get("name"): t.get("template") for t in template}
        template = named.get("default")
    if not isinstance(template, str):
        raise ValueError(f"{TOKENIZER_CONFIG_FILE} has no default chat_template")
    return template


@lru_cache(maxsize=None)
def tokenizer_config_bytes() -> bytes:
    """
    Lay noi dung tokenizer config cua model mac dinh.

    Returns:
        Bytes cua file tokenizer.json
    """
    model = get_default_model()
    path = _bundled_path(model, model.tokenizer_file)
    if path is None:
        path = _download(model, model.tokenizer_file)
    return path.read_bytes()


@lru_cache(maxsize=None)
def chat_template_source() -> str:
    """
    Lay source cua chat template (Jinja) cua model mac dinh.

    Returns:
        Template source text
    """
    model = get_default_model()
    path = _bundled_path(model, model.chat_template_file)
    if path is not None:
        return path.read_text(encoding="utf-8")

    try:
        path = _download(model, model.chat_template_file)
    except EntryNotFoundError:
        config_path = _download(model, TOKENIZER_CONFIG_FILE)
        return _template_from_tokenizer_config(config_path.read_bytes())
    return path.read_text(encoding="utf-8")


@lru_cache(maxsize=None)
def asset_digest() -> str:
    """
    Digest nhan dang phien ban asset dang dung.

    Doi tokenizer hoac template la doi ket qua dem token,
    caller co the ghi digest nay cung voi so token.
    """
    h = hashlib.sha256()
    h.update(tokenizer_config_bytes())
    h.update(b"\0")
    h.update(chat_template_source().encode("utf-8"))
    return h.hexdigest()[:16]


def fetch_assets(dest: Optional[Path] = None) -> List[Path]:
    """
    Tai tokenizer.json + chat template cua model mac dinh vao dest.

    Chay mot lan truoc khi build package de asset duoc dong goi cung wheel.

    Args:
        dest: Thu muc dich (None = glm_tokens/assets/<model>/)

    Returns:
        Duong dan cac file da ghi
    """
    model = get_default_model()
    target = dest if dest is not None else get_asset_dir(model.asset_dir)
    target.mkdir(parents=True, exist_ok=True)

    written = [_download(model, model.tokenizer_file, local_dir=target)]
    try:
        written.append(_download(model, model.chat_template_file, local_dir=target))
    except EntryNotFoundError:
        config_path = _download(model, TOKENIZER_CONFIG_FILE)
        template_path = target / model.chat_template_file
        template_path.write_text(
            _template_from_tokenizer_config(config_path.read_bytes()),
            encoding="utf-8",
        )
        written.append(template_path)
    return written

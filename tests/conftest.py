"""Fixtures dung chung cho tokenization tests.

- fixture_tokenizer / fixture_renderer: asset nho trong tests/fixtures/ (WordLevel
  tokenizer + chat template dang GLM), so token tinh tay duoc, khong can mang
- glm_assets: asset that cua GLM-4.6 (vendor hoac Hugging Face Hub);
  skip test neu khong tai duoc
"""

from pathlib import Path

import pytest

from glm_tokens.core.assets import chat_template_source, tokenizer_config_bytes
from glm_tokens.core.tokenization.resource import TokenizerResource
from glm_tokens.core.tokenization.template import ChatTemplateRenderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def wordlevel_config():
    """Callable tra ve bytes cua tokenizer WordLevel dung cho test."""
    data = (FIXTURES_DIR / "wordlevel_tokenizer.json").read_bytes()
    return lambda: data


@pytest.fixture(scope="session")
def fixture_template():
    """Callable tra ve source cua chat template dung cho test."""
    source = (FIXTURES_DIR / "chat_template.jinja").read_text(encoding="utf-8")
    return lambda: source


@pytest.fixture
def fixture_tokenizer(wordlevel_config):
    return TokenizerResource(config_bytes=wordlevel_config, name="fixture tokenizer")


@pytest.fixture
def fixture_renderer(fixture_template):
    return ChatTemplateRenderer(source=fixture_template)


@pytest.fixture(scope="session")
def glm_assets():
    """Dam bao asset GLM-4.6 that co san, neu khong thi skip."""
    try:
        tokenizer_config_bytes()
        chat_template_source()
    except Exception as e:
        pytest.skip(f"GLM-4.6 assets unavailable: {e}")

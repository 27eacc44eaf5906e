"""
Template Renderer - Render chat template thanh prompt text chinh xac.

Dung Jinja2 sandbox (ImmutableSandboxedEnvironment) theo quy uoc chat template
cua Hugging Face: trim_blocks/lstrip_blocks, loopcontrols, raise_exception(),
filter tojson. Cac method cua str (strip, split, startswith...) dung truc tiep
trong template.

Bien khong ton tai render rong va co the test bang `if` (vd: `if tools`),
giong cach transformers render chat template cua model.

Environment + template duoc compile moi lan render (khong cache).
"""

import json
from typing import Any, Callable, Iterable, NoReturn

import jinja2
from jinja2.sandbox import ImmutableSandboxedEnvironment

from glm_tokens.core.assets import chat_template_source
from glm_tokens.core.errors import TemplateRenderError
from glm_tokens.core.tokenization.types import ChatMessage, RenderContext


def _raise_exception(message: str) -> NoReturn:
    raise jinja2.TemplateError(message)


def _tojson(
    value: Any,
    ensure_ascii: bool = False,
    indent: Any = None,
    separators: Any = None,
    sort_keys: bool = False,
) -> str:
    return json.dumps(
        value,
        ensure_ascii=ensure_ascii,
        indent=indent,
        separators=separators,
        sort_keys=sort_keys,
    )


def get_jinja_environment() -> ImmutableSandboxedEnvironment:
    """
    Tao Jinja2 environment cho chat template.

    Returns:
        Sandboxed environment voi:
        - Khong autoescape (sinh prompt, khong phai HTML)
        - raise_exception() global va tojson filter
    """
    env = ImmutableSandboxedEnvironment(
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        extensions=["jinja2.ext.loopcontrols"],
    )
    env.globals["raise_exception"] = _raise_exception
    env.filters["tojson"] = _tojson
    return env


class ChatTemplateRenderer:
    """Render chat template cua model thanh prompt text."""

    def __init__(self, source: Callable[[], str] = chat_template_source):
        self._source = source

    def render(
        self,
        messages: Iterable[ChatMessage],
        add_generation_prompt: bool,
    ) -> str:
        """
        Render messages theo chat template.

        Args:
            messages: Danh sach ChatMessage theo thu tu
            add_generation_prompt: Them marker bao model bat dau tra loi

        Returns:
            Prompt text chinh xac ma model nhan duoc

        Raises:
            TemplateRenderError: Khong tai duoc template, template loi cu phap,
                sai kieu du lieu message, hoac template tu raise_exception()
        """
        try:
            source = self._source()
        except Exception as e:
            raise TemplateRenderError(e, detail=f"chat template unavailable: {e}") from e

        try:
            context = RenderContext(
                messages=tuple(messages),
                add_generation_prompt=add_generation_prompt,
            )
            template_vars = context.as_template_vars()
            template = get_jinja_environment().from_string(source)
            return template.render(**template_vars)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(e) from e
        except (TypeError, ValueError, AttributeError, KeyError, IndexError) as e:
            raise TemplateRenderError(e) from e


# Renderer dung chat template dong goi
GLM_CHAT_TEMPLATE = ChatTemplateRenderer()


def render_chat_template(
    messages: Iterable[ChatMessage], add_generation_prompt: bool = True
) -> str:
    """Render voi chat template mac dinh."""
    return GLM_CHAT_TEMPLATE.render(messages, add_generation_prompt)

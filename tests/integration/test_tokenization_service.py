"""
Integration tests cho TokenizationService va public entry points.

Test cac tuong tac THUC giua cac component:
- TokenizationService <-> TokenizerResource (lazy build, asset fixture va GLM-4.6)
- TokenizationService <-> ChatTemplateRenderer (render truoc, encode sau)
- TokenizationService <-> OffloadExecutor (khong block loop)
- encoder_registry <-> TokenizationService (singleton)
- count_raw / count_chat: determinism, chat overhead, concurrency, error precedence
"""

import asyncio
import threading
from unittest.mock import MagicMock

import pytest

import glm_tokens
from glm_tokens import (
    ChatMessage,
    ErrorKind,
    ExecutionError,
    TemplateRenderError,
    TokenCountError,
    TokenizationError,
    count_chat,
    count_raw,
    count_raw_batch,
    render_chat,
)
from glm_tokens.core.tokenization.resource import TokenizerResource
from glm_tokens.core.tokenization.template import ChatTemplateRenderer
from glm_tokens.core.utils.threading_utils import OffloadExecutor
from glm_tokens.services.interfaces.tokenization_service import ITokenizationService
from glm_tokens.services.tokenization_service import TokenizationService


# ================================================================
# A. Interface Compliance + Singleton
# ================================================================


class TestInterfaceCompliance:
    """Verify TokenizationService implements ITokenizationService dung contract."""

    def test_is_subclass(self):
        assert issubclass(TokenizationService, ITokenizationService)

    def test_all_methods_are_coroutines(self):
        service = TokenizationService()
        for name in ["count_raw", "count_chat", "count_raw_batch", "render_chat"]:
            assert asyncio.iscoroutinefunction(getattr(service, name))


class TestEncoderRegistrySingleton:
    """Test encoder_registry.get_tokenization_service() singleton behavior."""

    def test_returns_same_instance(self):
        import glm_tokens.services.encoder_registry as reg

        assert reg.get_tokenization_service() is reg.get_tokenization_service()

    def test_thread_safe_init(self):
        import glm_tokens.services.encoder_registry as reg

        results = []

        def get_service():
            results.append(id(reg.get_tokenization_service()))

        threads = [threading.Thread(target=get_service) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1, "Singleton bi tao nhieu instance!"


# ================================================================
# B. Service voi asset fixture (so token tinh tay)
# ================================================================


@pytest.fixture
def fixture_service(fixture_tokenizer, fixture_renderer):
    executor = OffloadExecutor(max_workers=2)
    yield TokenizationService(
        tokenizer=fixture_tokenizer, renderer=fixture_renderer, executor=executor
    )
    executor.shutdown(wait=True)


class TestServiceWithFixtureAssets:
    """Dem token chinh xac voi tokenizer + template fixture."""

    @pytest.mark.asyncio
    async def test_count_raw(self, fixture_service):
        assert await fixture_service.count_raw("Hello, world!") == 4
        assert await fixture_service.count_raw("") == 0

    @pytest.mark.asyncio
    async def test_system_user_chat(self, fixture_service):
        messages = [
            ChatMessage.system("You are a helpful assistant."),
            ChatMessage.user("Hello, world!"),
        ]
        assert await fixture_service.count_chat(messages) == 15
        raw = "You are a helpful assistant.Hello, world!"
        assert await fixture_service.count_raw(raw) == 10

    @pytest.mark.asyncio
    async def test_single_user_chat(self, fixture_service):
        assert await fixture_service.count_chat([ChatMessage.user("Hello, world!")]) == 8

    @pytest.mark.asyncio
    async def test_empty_messages(self, fixture_service):
        assert await fixture_service.render_chat([]) == "[gMASK]<sop><|assistant|>"
        assert await fixture_service.count_chat([]) == 3

    @pytest.mark.asyncio
    async def test_template_raise_exception_is_template_error(self, fixture_service):
        with pytest.raises(TemplateRenderError) as exc_info:
            await fixture_service.count_chat([ChatMessage("narrator", "Once upon a time")])
        assert exc_info.value.kind is ErrorKind.TEMPLATE
        assert isinstance(exc_info.value, TokenCountError)

    @pytest.mark.asyncio
    async def test_caller_mutation_after_call_is_ignored(self, fixture_service):
        messages = [ChatMessage.user("Hello, world!")]
        pending = asyncio.ensure_future(fixture_service.count_chat(messages))
        await asyncio.sleep(0)
        messages.append(ChatMessage.user("more words appended later"))
        assert await pending == 8


# ================================================================
# C. Public entry points voi asset GLM-4.6 that
# ================================================================


@pytest.mark.usefixtures("glm_assets")
class TestCountRaw:
    """Test count_raw()."""

    @pytest.mark.asyncio
    async def test_hello_world(self):
        assert await count_raw("Hello, world!") > 0

    @pytest.mark.asyncio
    async def test_empty_text(self):
        assert await count_raw("") == 0

    @pytest.mark.asyncio
    async def test_deterministic(self):
        text = "Please write a function that returns the first number."
        counts = [await count_raw(text) for _ in range(10)]
        assert len(set(counts)) == 1
        assert counts[0] > 0

    @pytest.mark.asyncio
    async def test_count_grows_with_input(self):
        assert await count_raw("x" * 10000) > await count_raw("x" * 100)

    @pytest.mark.asyncio
    async def test_non_string_is_tokenization_error(self):
        with pytest.raises(TokenizationError):
            await count_raw(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_batch_matches_single(self):
        texts = ["Hello, world!", "You are a helpful assistant.", "", "你好世界"]
        expected = [await count_raw(t) for t in texts]
        assert await count_raw_batch(texts) == expected


@pytest.mark.usefixtures("glm_assets")
class TestCountChat:
    """Test count_chat()."""

    @pytest.mark.asyncio
    async def test_system_user_exceeds_raw_concatenation(self):
        messages = [
            ChatMessage.system("You are a helpful assistant."),
            ChatMessage.user("Hello, world!"),
        ]
        chat = await count_chat(messages)
        raw = await count_raw("You are a helpful assistant.Hello, world!")
        assert chat > raw

    @pytest.mark.asyncio
    async def test_single_user_message(self):
        raw = await count_raw("Hello, world!")
        chat = await count_chat([ChatMessage.user("Hello, world!")])
        assert chat > raw

    @pytest.mark.asyncio
    async def test_with_assistant(self):
        messages = [ChatMessage.user("Hello!"), ChatMessage.assistant("Hi there!")]
        assert await count_chat(messages) > 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "messages",
        [
            [ChatMessage.user("a")],
            [ChatMessage.system("rules"), ChatMessage.user("question?")],
            [
                ChatMessage.user("weather in Hanoi?"),
                ChatMessage.assistant("Checking."),
                ChatMessage.tool("sunny, 31C"),
            ],
        ],
    )
    async def test_overhead_over_raw_contents(self, messages):
        concatenated = "".join(m.content for m in messages)
        assert await count_chat(messages) > await count_raw(concatenated)

    @pytest.mark.asyncio
    async def test_empty_messages_follow_bundled_template(self):
        """Danh sach rong -> prompt toi thieu cua template (prefix + generation marker)."""
        prompt = await render_chat([])
        assert prompt.startswith("[gMASK]<sop>")
        assert prompt.rstrip().endswith("<|assistant|>")
        count = await count_chat([])
        assert count >= 3
        assert count == await count_raw(prompt)

    @pytest.mark.asyncio
    async def test_render_chat_is_what_count_chat_counts(self):
        messages = [ChatMessage.user("Hello, world!")]
        prompt = await render_chat(messages)
        assert await count_raw(prompt) == await count_chat(messages)

    @pytest.mark.asyncio
    async def test_non_iterable_messages_is_template_error(self):
        with pytest.raises(TemplateRenderError):
            await count_chat(42)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_caller_mutation_after_call_is_ignored(self):
        messages = [ChatMessage.user("Hello, world!")]
        expected = await count_chat(list(messages))
        pending = asyncio.ensure_future(count_chat(messages))
        await asyncio.sleep(0)
        messages.append(ChatMessage.user("more words appended later"))
        assert await pending == expected


# ================================================================
# D. Concurrency
# ================================================================


def _counting_asset(calls, config_bytes):
    def provider() -> bytes:
        calls.append(threading.get_ident())
        return config_bytes()

    return provider


class TestConcurrency:
    """Concurrent first access vao tokenizer moi (chua build)."""

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_build_once(self, wordlevel_config):
        calls = []
        executor = OffloadExecutor(max_workers=8)
        service = TokenizationService(
            tokenizer=TokenizerResource(
                config_bytes=_counting_asset(calls, wordlevel_config)
            ),
            executor=executor,
        )
        try:
            results = await asyncio.gather(
                *(service.count_raw("Hello, world!") for _ in range(16))
            )
        finally:
            executor.shutdown(wait=True)

        assert results == [4] * 16
        assert len(calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("glm_assets")
    async def test_concurrent_mixed_raw_and_chat(self):
        messages = [ChatMessage.system("be brief"), ChatMessage.user("Hello, world!")]
        raw_expected = await count_raw("Hello, world!")
        chat_expected = await count_chat(messages)

        results = await asyncio.gather(
            *[count_raw("Hello, world!") for _ in range(8)],
            *[count_chat(messages) for _ in range(8)],
        )
        assert results[:8] == [raw_expected] * 8
        assert results[8:] == [chat_expected] * 8

    @pytest.mark.asyncio
    async def test_corrupted_asset_fails_every_concurrent_caller(self, fixture_renderer):
        """Asset hong: moi caller nhan TokenizationError, khong crash, khong treo."""
        calls = []

        def corrupted() -> bytes:
            calls.append(1)
            return b"{ this is not json"

        executor = OffloadExecutor(max_workers=8)
        service = TokenizationService(
            tokenizer=TokenizerResource(config_bytes=corrupted),
            renderer=fixture_renderer,
            executor=executor,
        )
        try:
            results = await asyncio.wait_for(
                asyncio.gather(
                    *(service.count_raw("Hello, world!") for _ in range(8)),
                    *(service.count_chat([ChatMessage.user("hi")]) for _ in range(4)),
                    return_exceptions=True,
                ),
                timeout=10,
            )
        finally:
            executor.shutdown(wait=True)

        assert len(results) == 12
        assert all(isinstance(r, TokenizationError) for r in results)
        assert len({id(r) for r in results}) == 12
        assert len({id(r.cause) for r in results}) == 1
        assert len(calls) == 1


# ================================================================
# E. Error precedence + executor errors
# ================================================================


def _failing_renderer() -> ChatTemplateRenderer:
    return ChatTemplateRenderer(
        source=lambda: "{{ raise_exception('Unsupported message role') }}"
    )


class TestErrorPrecedence:
    """Template loi -> khong bao gio encode."""

    @pytest.mark.asyncio
    async def test_template_failure_skips_tokenization(self):
        tokenizer = MagicMock(spec=TokenizerResource)
        executor = OffloadExecutor(max_workers=1)
        service = TokenizationService(
            tokenizer=tokenizer, renderer=_failing_renderer(), executor=executor
        )
        try:
            with pytest.raises(TemplateRenderError):
                await service.count_chat([ChatMessage.user("hi")])
        finally:
            executor.shutdown(wait=True)

        tokenizer.encode.assert_not_called()

    @pytest.mark.asyncio
    async def test_template_error_preempts_broken_tokenizer(self):
        executor = OffloadExecutor(max_workers=1)
        service = TokenizationService(
            tokenizer=TokenizerResource(config_bytes=lambda: b"broken"),
            renderer=_failing_renderer(),
            executor=executor,
        )
        try:
            with pytest.raises(TemplateRenderError):
                await service.count_chat([ChatMessage.user("hi")])
        finally:
            executor.shutdown(wait=True)

    @pytest.mark.asyncio
    async def test_shut_down_executor_is_execution_error(self):
        executor = OffloadExecutor(max_workers=1)
        executor.shutdown()
        service = TokenizationService(executor=executor)

        with pytest.raises(ExecutionError):
            await service.count_raw("Hello")
        with pytest.raises(ExecutionError):
            await service.count_chat([ChatMessage.user("Hello")])

    @pytest.mark.asyncio
    async def test_unexpected_tokenizer_fault_is_execution_error(self):
        """Loi ngoai taxonomy trong work -> ExecutionError (khong lot ra ngoai)."""
        tokenizer = MagicMock(spec=TokenizerResource)
        tokenizer.encode.side_effect = RuntimeError("worker crashed")
        executor = OffloadExecutor(max_workers=1)
        service = TokenizationService(tokenizer=tokenizer, executor=executor)
        try:
            with pytest.raises(ExecutionError) as exc_info:
                await service.count_raw("Hello")
        finally:
            executor.shutdown(wait=True)

        assert isinstance(exc_info.value.cause, RuntimeError)


@pytest.mark.usefixtures("glm_assets")
class TestPackageExports:
    def test_asset_digest_is_stable(self):
        digest = glm_tokens.asset_digest()
        assert digest == glm_tokens.asset_digest()
        assert len(digest) == 16
        int(digest, 16)

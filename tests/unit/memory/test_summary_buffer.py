"""
Tests for SummaryBufferMemory.

The summarizer is a scripted MockLLM and tokens are counted in words, so
every fold below can be followed by hand.
"""

import pytest

from ragcore.entities.message import ChatMessage, MessageRole, ToolCallBlock
from ragcore.errors import NetworkError, ProviderError, ValidationError
from ragcore.llm import MockLLM
from ragcore.memory import DEFAULT_SUMMARIZE_PROMPT, MemoryFactory, SummaryBufferMemory, is_summary
from ragcore.utils.retry import RetryConfig

NO_WAIT = RetryConfig(max_attempts=2, base_delay=0.0, jitter=0.0)


def words(n: int, word: str = "w") -> str:
    return " ".join([word] * n)


def make_memory(summarizer: MockLLM, word_tokenizer, limit: int = 10) -> SummaryBufferMemory:
    return SummaryBufferMemory(
        summary_llm=summarizer,
        summary_token_limit=limit,
        tokenizer=word_tokenizer,
        retry_config=NO_WAIT,
    )


class TestSummarization:

    @pytest.mark.asyncio
    async def test_no_summary_while_within_limit(self, word_tokenizer):
        summarizer = MockLLM(default_response="sum")
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put(ChatMessage.user(words(4)))
        await memory.put(ChatMessage.assistant(words(4)))
        assert summarizer.call_count == 0
        assert memory.summary is None

    @pytest.mark.asyncio
    async def test_oldest_turn_is_folded(self, word_tokenizer):
        summarizer = MockLLM(responses=["short sum"])
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put(ChatMessage.user("a b c d"))
        await memory.put(ChatMessage.assistant("e f g h"))
        await memory.put(ChatMessage.user("i j k l"))

        messages = await memory.get_all()
        assert is_summary(messages[0])
        assert messages[0].role == MessageRole.ASSISTANT
        assert messages[0].text == "short sum"
        assert [m.text for m in messages[1:]] == ["e f g h", "i j k l"]
        assert memory.summarized_count == 1

        request = summarizer.calls[0]
        assert request[0].role == MessageRole.SYSTEM
        assert request[0].text == DEFAULT_SUMMARIZE_PROMPT
        assert request[1].text == "Transcript so far:\nuser: a b c d\n\n"

    @pytest.mark.asyncio
    async def test_previous_summary_is_folded_forward(self, word_tokenizer):
        summarizer = MockLLM(responses=["short sum", "longer summary text"], default_response="s")
        memory = make_memory(summarizer, word_tokenizer)
        for text in ["a b c d", "e f g h", "i j k l", "m n o p"]:
            await memory.put(ChatMessage.user(text))

        assert summarizer.prompts[1].endswith(
            "Previous summary:\nshort sum\n\nTranscript so far:\nuser: e f g h\n\n"
        )
        messages = await memory.get_all()
        assert [m.text for m in messages] == ["s", "m n o p"]
        assert memory.summarized_count == 3
        assert summarizer.call_count == 3

    @pytest.mark.asyncio
    async def test_every_message_is_kept_or_summarized(self, word_tokenizer):
        memory = make_memory(MockLLM(default_response="sum"), word_tokenizer, limit=12)
        sizes = [3, 5, 2, 6, 4, 4, 7, 1, 3]
        for i, n in enumerate(sizes, start=1):
            await memory.put(ChatMessage.user(words(n)))
            verbatim = [m for m in await memory.get_all() if not is_summary(m)]
            assert memory.summarized_count + len(verbatim) == i
            assert sum(word_tokenizer(m.text) for m in await memory.get_all()) <= 12

    @pytest.mark.asyncio
    async def test_leading_system_message_is_kept(self, word_tokenizer):
        summarizer = MockLLM(default_response="sum")
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put_messages([
            ChatMessage.system("be nice"),
            ChatMessage.user(words(4)),
            ChatMessage.assistant(words(4)),
        ])
        await memory.put(ChatMessage.user(words(4, "q")))

        messages = await memory.get_all()
        assert messages[0].role == MessageRole.SYSTEM
        assert is_summary(messages[1])
        assert messages[2].text == words(4, "q")
        assert summarizer.call_count == 2
        assert memory.summarized_count == 2

    @pytest.mark.asyncio
    async def test_tool_result_folded_with_its_call(self, word_tokenizer):
        memory = make_memory(MockLLM(default_response="sum"), word_tokenizer)
        call = ToolCallBlock(id="call_1", name="search")
        await memory.put_messages([
            ChatMessage.assistant("calling tool now", tool_calls=[call]),
            ChatMessage.tool_result("call_1", "r r r r"),
        ])
        await memory.put(ChatMessage.user(words(4, "q")))

        messages = await memory.get_all()
        assert is_summary(messages[0])
        assert [m.role for m in messages[1:]] == [MessageRole.USER]
        assert memory.summarized_count == 2

    @pytest.mark.asyncio
    async def test_nothing_to_fold_keeps_messages(self, word_tokenizer):
        summarizer = MockLLM(default_response="sum")
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put(ChatMessage.system(words(12, "s")))
        assert len(memory) == 1
        assert summarizer.call_count == 0


class TestFailures:

    @pytest.mark.asyncio
    async def test_summarizer_failure_leaves_memory_unchanged(self, word_tokenizer):
        summarizer = MockLLM(responses=[ProviderError("bad request")])
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put_messages([ChatMessage.user(words(4)), ChatMessage.assistant(words(4))])
        before = await memory.get_all()

        with pytest.raises(ProviderError):
            await memory.put(ChatMessage.user(words(4)))
        assert await memory.get_all() == before
        assert summarizer.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_retried_once(self, word_tokenizer):
        summarizer = MockLLM(responses=[NetworkError("reset"), "sum"])
        memory = make_memory(summarizer, word_tokenizer)
        await memory.put_messages([ChatMessage.user(words(4)), ChatMessage.assistant(words(4))])
        await memory.put(ChatMessage.user(words(4)))
        assert summarizer.call_count == 2
        assert memory.summary.text == "sum"

    @pytest.mark.asyncio
    async def test_misplaced_summary_rejected(self, word_tokenizer):
        memory = make_memory(MockLLM(default_response="sum"), word_tokenizer, limit=100)
        summary = ChatMessage.assistant("old", memory_summary=True, summarized_count=3)
        with pytest.raises(ValidationError):
            await memory.set([ChatMessage.user("hi"), summary])
        assert len(memory) == 0


class TestRoundTrip:

    @pytest.mark.asyncio
    async def test_set_get_all_is_a_no_op(self, word_tokenizer):
        summarizer = MockLLM(default_response="sum")
        memory = make_memory(summarizer, word_tokenizer)
        for n in [4, 4, 4, 3]:
            await memory.put(ChatMessage.user(words(n)))
        before = await memory.get_all()
        calls = summarizer.call_count

        await memory.set(await memory.get_all())
        assert await memory.get_all() == before
        assert summarizer.call_count == calls
        assert memory.summarized_count + len([m for m in before if not is_summary(m)]) == 4

    @pytest.mark.asyncio
    async def test_restore_into_fresh_memory(self, word_tokenizer):
        memory = make_memory(MockLLM(default_response="sum"), word_tokenizer)
        for n in [4, 4, 4]:
            await memory.put(ChatMessage.user(words(n)))

        restored = make_memory(MockLLM(default_response="unused"), word_tokenizer)
        await restored.set(await memory.get_all())
        assert restored.summary.text == "sum"
        assert restored.summarized_count == memory.summarized_count


class TestConstruction:

    def test_from_llm(self):
        llm = MockLLM()
        memory = SummaryBufferMemory.from_llm(llm)
        assert memory.summary_llm is llm
        assert memory.summary_token_limit == int(0.75 * (4096 - 1024))

    def test_factory_needs_summary_llm(self):
        llm = MockLLM()
        memory = MemoryFactory.create("summary_buffer", summary_llm=llm, summary_token_limit=50)
        assert isinstance(memory, SummaryBufferMemory)

"""OpenAI-compatible API executor with a fake client."""

from types import SimpleNamespace

import pytest

from grey_so.core.exceptions import EmptyModelResponse
from grey_so.providers.llm.openai_api_executor import OpenAICompatibleExecutor


class _FakeCompletions:
    def __init__(self, completion):
        self.completion = completion
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.completion


def _client(content, usage=None):
    message = SimpleNamespace(content=content)
    completion = SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)
    completions = _FakeCompletions(completion)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.mark.asyncio
async def test_sends_one_system_and_one_user_message():
    usage = SimpleNamespace(prompt_tokens=1000, completion_tokens=200, total_tokens=1200)
    client, completions = _client("Use a queue.", usage)
    executor = OpenAICompatibleExecutor(api_key="k", client=client)

    result = await executor.execute("How?", "gpt-5.3-codex", "SYS")

    assert result.response == "Use a queue."
    assert result.usage.prompt_tokens == 1000
    assert result.usage.total_tokens == 1200
    assert completions.calls == [
        {
            "model": "gpt-5.3-codex",
            "messages": [
                {"role": "system", "content": "SYS"},
                {"role": "user", "content": "How?"},
            ],
        }
    ]


@pytest.mark.asyncio
async def test_empty_content_is_an_error():
    client, _ = _client("")
    executor = OpenAICompatibleExecutor(api_key="k", provider_name="gemini", client=client)

    with pytest.raises(EmptyModelResponse, match="via API"):
        await executor.execute("How?", "gemini-3-pro-preview", "SYS")
    assert executor.name == "gemini-api"


@pytest.mark.asyncio
async def test_file_paths_are_ignored_without_usage():
    client, completions = _client("ok")
    executor = OpenAICompatibleExecutor(api_key="k", client=client)

    result = await executor.execute("How?", "gpt-5.3-codex", "SYS", ["/tmp/a.py"])

    assert result.usage is None
    assert "a.py" not in completions.calls[0]["messages"][1]["content"]

from unittest.mock import patch, MagicMock

import pytest

from api_module_agent.errors import LlmReplyError
from api_module_agent.llm import DEFAULT_MODEL, SYSTEM_PROMPT, LlmClient


def _response(content):
    mock_resp = MagicMock()
    mock_resp.choices = [MagicMock()]
    mock_resp.choices[0].message.content = content
    return mock_resp


class TestLlmClient:
    def test_default_model(self, monkeypatch):
        monkeypatch.delenv("API_MODULES_MODEL", raising=False)
        assert LlmClient().model == DEFAULT_MODEL

    def test_model_from_env(self, monkeypatch):
        monkeypatch.setenv("API_MODULES_MODEL", "gpt-4o-mini")
        assert LlmClient().model == "gpt-4o-mini"

    def test_explicit_model_wins(self, monkeypatch):
        monkeypatch.setenv("API_MODULES_MODEL", "gpt-4o-mini")
        assert LlmClient(model="gpt-4o").model == "gpt-4o"

    @patch("api_module_agent.llm.completion")
    def test_send_prompt_uses_system_prompt(self, mock_completion):
        mock_completion.return_value = _response("plan")

        client = LlmClient(model="gpt-4o")
        result = client.send_prompt("## Tarea solicitada\n\nX")

        assert result == "plan"
        call_kwargs = mock_completion.call_args[1]
        assert call_kwargs["model"] == "gpt-4o"
        messages = call_kwargs["messages"]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1] == {"role": "user", "content": "## Tarea solicitada\n\nX"}

    @patch("api_module_agent.llm.completion")
    def test_custom_system_prompt(self, mock_completion):
        mock_completion.return_value = _response("ok")

        LlmClient(model="gpt-4o", system_prompt="Responde en inglés.").send_prompt("X")

        messages = mock_completion.call_args[1]["messages"]
        assert messages[0]["content"] == "Responde en inglés."

    @patch("api_module_agent.llm.completion")
    def test_empty_reply_raises(self, mock_completion):
        mock_completion.return_value = _response(None)

        with pytest.raises(LlmReplyError, match="gpt-4o"):
            LlmClient(model="gpt-4o").send_prompt("X")

from unittest.mock import MagicMock

import requests

from api_module_agent.client.cache import ModuleCache
from api_module_agent.client.module_client import ModuleClient
from api_module_agent.config import ProjectContext, Settings
from api_module_agent.generator.prompt import (
    assemble_prompt,
    build_simple_prompt,
    format_endpoint,
    generate_prompt,
)
from api_module_agent.parser.base import ApiEndpoint, ModuleDocument, Param, RequestBodyRef
from api_module_agent.tokens import estimate_tokens


def _ep(method, path, **kwargs):
    return ApiEndpoint(operation_id=kwargs.pop("operation_id", f"{method.lower()}_{path}"), method=method, path=path, **kwargs)


def _client(fetch):
    return ModuleClient(Settings(base_url="https://modules.example.com"), cache=ModuleCache(), fetch=fetch)


class TestFormatEndpoint:
    def test_full_block(self):
        ep = _ep(
            "POST",
            "/api/paia/assistants/{id}",
            operation_id="updateAssistant",
            summary="Update assistant",
            parameters=[
                Param(name="id", location="path", required=True),
                Param(name="dryRun", location="query"),
            ],
            request_body=RequestBodyRef(required=True, schema_ref="AssistantInput"),
        )
        assert format_endpoint(ep) == (
            "**POST /api/paia/assistants/{id}**\n"
            "- operationId: `updateAssistant`\n"
            "- Update assistant\n"
            "- Params: `id` (path) (required), `dryRun` (query)\n"
            "- Has request body: yes"
        )

    def test_minimal_block(self):
        assert format_endpoint(_ep("GET", "/health", operation_id="health")) == (
            "**GET /health**\n- operationId: `health`"
        )


class TestAssemblePrompt:
    def test_fallback_without_module(self):
        text = assemble_prompt(None, [], "Agregar filtro por fecha")
        assert "Agregar filtro por fecha" in text
        assert "### Endpoints" not in text
        assert text == build_simple_prompt("Agregar filtro por fecha")

    def test_fallback_with_module_but_no_endpoints(self):
        text = assemble_prompt("auditor", [], "X")
        assert "### Endpoints" not in text

    def test_enriched_prompt(self):
        text = assemble_prompt("auditor", [_ep("GET", "/api/auditor/reports")], "X")
        assert "GET /api/auditor/reports" in text
        assert "Módulo: Auditor" in text
        assert "\n\nX\n\n" in text
        assert text.index("### Endpoints") < text.index("## Tarea solicitada") < text.index("## Notas importantes")

    def test_unknown_module_uses_id_as_label(self):
        text = assemble_prompt("custom", [_ep("GET", "/a")], "X")
        assert "Módulo: custom" in text

    def test_project_context(self):
        context = ProjectContext(name="crm-web", framework="Django", guide_reference="AGENTS.md", notes=["Usa DRF"])
        text = assemble_prompt(None, None, "X", context)
        assert "**crm-web**" in text
        assert "Django" in text
        assert "`AGENTS.md`" in text
        assert "- Usa DRF" in text

    def test_deterministic(self):
        endpoints = [_ep("GET", "/a"), _ep("DELETE", "/a")]
        assert assemble_prompt("system", endpoints, "X") == assemble_prompt("system", endpoints, "X")


class TestGeneratePrompt:
    def test_enriched_with_fetched_module(self):
        payload = ModuleDocument(
            module="auditor",
            version="1",
            generated_at="2026-01-01T00:00:00.000Z",
            endpoints=[_ep("GET", "/api/auditor/reports")],
        ).to_wire()
        result = generate_prompt(_client(MagicMock(return_value=payload)), "auditor", "Ver reportes de auditoría")
        assert result.has_module_context
        assert "GET /api/auditor/reports" in result.text
        assert result.estimated_tokens == estimate_tokens(result.text)
        assert result.error is None

    def test_fetch_failure_falls_back(self):
        client = _client(MagicMock(side_effect=requests.ConnectionError("offline")))
        result = generate_prompt(client, "auditor", "Ver reportes")
        assert not result.has_module_context
        assert "offline" in result.error
        assert "### Endpoints" not in result.text
        assert "Ver reportes" in result.text

    def test_empty_description(self):
        fetch = MagicMock()
        result = generate_prompt(_client(fetch), "auditor", "   ")
        assert result.text == ""
        assert result.estimated_tokens == 0
        fetch.assert_not_called()

    def test_no_module_skips_fetch(self):
        fetch = MagicMock()
        result = generate_prompt(_client(fetch), None, "Algo")
        assert not result.has_module_context
        fetch.assert_not_called()

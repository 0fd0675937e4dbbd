import json
import math

from api_module_agent.generator.markdown import render_markdown_index
from api_module_agent.generator.partition import (
    build_index,
    build_metadata,
    build_module_document,
    endpoints_for_module,
    unassigned_endpoints,
    utc_timestamp,
    write_outputs,
)
from api_module_agent.modules import DEFAULT_MODULES, get_module_by_id
from api_module_agent.parser.base import ApiEndpoint
from api_module_agent.parser.swagger import extract_endpoints
from api_module_agent.tokens import canonical_json, estimate_tokens

STAMP = "2026-01-01T00:00:00.000Z"


class TestEstimateTokens:
    def test_string_is_measured_directly(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_objects_use_compact_json(self):
        value = {"a": [1, 2], "b": "ñ"}
        assert canonical_json(value) == '{"a":[1,2],"b":"ñ"}'
        assert estimate_tokens(value) == math.ceil(len('{"a":[1,2],"b":"ñ"}') / 4)

    def test_models_encoded_by_alias(self):
        ep = ApiEndpoint(operation_id="x", method="GET", path="/a")
        assert canonical_json(ep) == '{"operationId":"x","method":"GET","path":"/a","tags":[]}'

    def test_appending_never_decreases(self):
        base = "Crear un endpoint"
        for extra in ("x", " más texto", "\n" * 9):
            assert estimate_tokens(base + extra) >= estimate_tokens(base)


class TestMembership:
    def test_non_exclusive(self, spec):
        endpoints = extract_endpoints(spec)
        queues = [ep for ep in endpoints if ep.path == "/api/queues"][0]
        owners = [m.id for m in DEFAULT_MODULES if m.owns(queues)]
        assert owners == ["dynamic-queues", "integrations"]

    def test_counts_per_module(self, spec):
        endpoints = extract_endpoints(spec)
        counts = {m.id: len(endpoints_for_module(endpoints, m)) for m in DEFAULT_MODULES}
        assert counts == {
            "paia-ai": 4,
            "auditor": 1,
            "dynamic-queues": 1,
            "integrations": 1,
            "infrastructure": 0,
            "system": 1,
        }

    def test_unassigned_includes_untagged(self, spec):
        unassigned = unassigned_endpoints(extract_endpoints(spec), DEFAULT_MODULES)
        assert [ep.path for ep in unassigned] == ["/api/legacy/leads", "/api/ping"]


class TestBuildIndex:
    def test_compact_encoding(self, spec):
        index = build_index(extract_endpoints(spec), DEFAULT_MODULES, "2.4.0", "local", STAMP)
        data = index.to_wire()
        assert data["totalEndpoints"] == 9
        assert data["source"] == "local"
        assert data["endpoints"][0] == {
            "m": "GET",
            "p": "/api/paia/assistants",
            "s": "List assistants",
            "t": ["CustomAssistants"],
            "o": "listAssistants",
        }
        ping = [e for e in data["endpoints"] if e["p"] == "/api/ping"][0]
        assert ping == {"m": "GET", "p": "/api/ping", "o": "ping"}

    def test_module_stats(self, spec):
        index = build_index(extract_endpoints(spec), DEFAULT_MODULES, "2.4.0", "remote", STAMP)
        stats = {m.id: m.endpoint_count for m in index.modules}
        assert stats["paia-ai"] == 4
        assert index.modules[0].tags == list(DEFAULT_MODULES[0].tags)


class TestBuildModuleDocument:
    def test_token_count_is_self_referential(self, spec):
        doc = build_module_document(get_module_by_id("auditor"), extract_endpoints(spec), "2.4.0", STAMP)
        assert [ep.operation_id for ep in doc.endpoints] == ["listAuditReports"]
        assert doc.token_count == estimate_tokens(doc.model_copy(update={"token_count": 0}))

    def test_empty_module(self, spec):
        doc = build_module_document(get_module_by_id("infrastructure"), extract_endpoints(spec), "2.4.0", STAMP)
        assert doc.endpoints == []
        assert doc.token_count > 0

    def test_idempotent_apart_from_timestamp(self, spec):
        endpoints = extract_endpoints(spec)
        mod = get_module_by_id("paia-ai")
        first = build_module_document(mod, endpoints, "2.4.0", STAMP)
        second = build_module_document(mod, extract_endpoints(spec), "2.4.0", STAMP)
        assert canonical_json(first) == canonical_json(second)
        assert canonical_json(build_index(endpoints, DEFAULT_MODULES, "2.4.0", "local", STAMP)) == canonical_json(
            build_index(endpoints, DEFAULT_MODULES, "2.4.0", "local", STAMP)
        )

    def test_default_timestamp_format(self):
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len(STAMP)


class TestBuildMetadata:
    def test_lists_module_files(self, spec):
        endpoints = extract_endpoints(spec)
        docs = [build_module_document(m, endpoints, "2.4.0", STAMP) for m in DEFAULT_MODULES]
        metadata = build_metadata(docs, "2.4.0", "local", STAMP).to_wire()
        assert metadata["modules"][1] == {
            "id": "auditor",
            "file": "modules/auditor.json",
            "endpointCount": 1,
            "tokenCount": docs[1].token_count,
        }


class TestMarkdownIndex:
    def test_tables_and_unassigned_section(self, spec):
        md = render_markdown_index(extract_endpoints(spec), DEFAULT_MODULES, "2.4.0", "local", STAMP)
        assert md.startswith("# API Index - v2.4.0")
        assert "## PAIA & AI" in md
        assert "## Infrastructure" not in md
        assert "| GET | `/api/auditor/reports` | List audit reports \\| paginated |" in md
        assert "## Unassigned" in md
        assert "| GET | `/api/legacy/leads` | Legacy | List leads |" in md
        assert "| GET | `/api/ping` | - | - |" in md


class TestWriteOutputs:
    def test_writes_all_artifacts(self, spec, tmp_path):
        endpoints = extract_endpoints(spec)
        report = write_outputs(tmp_path, endpoints, DEFAULT_MODULES, "2.4.0", "local", spec=spec, generated_at=STAMP)

        assert (tmp_path / "api-index.json").exists()
        assert (tmp_path / "metadata.json").exists()
        assert (tmp_path / "API-INDEX.md").exists()
        for mod in DEFAULT_MODULES:
            assert (tmp_path / "modules" / f"{mod.id}.json").exists()

        auditor = json.loads((tmp_path / "modules" / "auditor.json").read_text(encoding="utf-8"))
        assert auditor["module"] == "auditor"
        assert auditor["tokenCount"] == report.module_tokens["auditor"]
        assert report.module_counts["paia-ai"] == 4
        assert report.unassigned_count == 2
        assert report.savings_percent is not None

    def test_rerun_is_byte_identical(self, spec, tmp_path):
        endpoints = extract_endpoints(spec)
        first, second = tmp_path / "a", tmp_path / "b"
        write_outputs(first, endpoints, DEFAULT_MODULES, "2.4.0", "local", generated_at=STAMP)
        write_outputs(second, endpoints, DEFAULT_MODULES, "2.4.0", "local", generated_at=STAMP)
        for name in ("api-index.json", "metadata.json", "API-INDEX.md", "modules/paia-ai.json"):
            assert (first / name).read_bytes() == (second / name).read_bytes()

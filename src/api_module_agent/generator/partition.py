"""Module partitioner: splits extracted endpoints into per-module documents.

Produces the compact cross-module index, one ModuleDocument per module
definition and a metadata summary. Every builder takes an optional
`generated_at` so a rerun on the same input differs only in timestamps.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from pydantic import Field

from api_module_agent.generator.markdown import render_markdown_index
from api_module_agent.modules import ModuleDefinition
from api_module_agent.parser.base import ApiEndpoint, ModuleDocument, WireModel
from api_module_agent.tokens import estimate_tokens

INDEX_FILENAME = "api-index.json"
METADATA_FILENAME = "metadata.json"
MARKDOWN_FILENAME = "API-INDEX.md"
MODULES_DIRNAME = "modules"


class CompactEndpoint(WireModel):
    """Index entry with single-letter keys: method, path, summary, tags, operationId."""

    m: str
    p: str
    s: str | None = None
    t: list[str] | None = None
    o: str | None = None


class ModuleStats(WireModel):
    id: str
    label: str
    endpoint_count: int = Field(alias="endpointCount")
    tags: list[str]


class ApiIndex(WireModel):
    """Cross-module summary used to choose a module without downloading any."""

    version: str
    source: str
    generated_at: str = Field(alias="generatedAt")
    total_endpoints: int = Field(alias="totalEndpoints")
    modules: list[ModuleStats]
    endpoints: list[CompactEndpoint]


class ModuleFileInfo(WireModel):
    id: str
    file: str
    endpoint_count: int = Field(alias="endpointCount")
    token_count: int = Field(alias="tokenCount")


class Metadata(WireModel):
    version: str
    source: str
    generated_at: str = Field(alias="generatedAt")
    modules: list[ModuleFileInfo]


@dataclass
class BuildReport:
    """Summary of one partitioning run, for CLI output."""

    output_dir: Path
    total_endpoints: int
    index_tokens: int
    module_tokens: dict[str, int] = field(default_factory=dict)
    module_counts: dict[str, int] = field(default_factory=dict)
    unassigned_count: int = 0
    spec_tokens: int | None = None

    @property
    def total_module_tokens(self) -> int:
        return sum(self.module_tokens.values())

    @property
    def savings_percent(self) -> int | None:
        """How much smaller the index is than the full specification."""
        if not self.spec_tokens:
            return None
        return round((1 - self.index_tokens / self.spec_tokens) * 100)


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def endpoints_for_module(endpoints: list[ApiEndpoint], module: ModuleDefinition) -> list[ApiEndpoint]:
    return [ep for ep in endpoints if module.owns(ep)]


def unassigned_endpoints(
    endpoints: list[ApiEndpoint], modules: tuple[ModuleDefinition, ...]
) -> list[ApiEndpoint]:
    """Endpoints that no module claims, untagged ones included."""
    return [ep for ep in endpoints if not any(m.owns(ep) for m in modules)]


def build_index(
    endpoints: list[ApiEndpoint],
    modules: tuple[ModuleDefinition, ...],
    version: str,
    source: str,
    generated_at: str | None = None,
) -> ApiIndex:
    compact = [
        CompactEndpoint(
            m=ep.method,
            p=ep.path,
            s=ep.summary or None,
            t=list(ep.tags) or None,
            o=ep.operation_id or None,
        )
        for ep in endpoints
    ]
    stats = [
        ModuleStats(
            id=mod.id,
            label=mod.label,
            endpoint_count=len(endpoints_for_module(endpoints, mod)),
            tags=list(mod.tags),
        )
        for mod in modules
    ]
    return ApiIndex(
        version=version,
        source=source,
        generated_at=generated_at or utc_timestamp(),
        total_endpoints=len(endpoints),
        modules=stats,
        endpoints=compact,
    )


def build_module_document(
    module: ModuleDefinition,
    endpoints: list[ApiEndpoint],
    version: str,
    generated_at: str | None = None,
) -> ModuleDocument:
    """Build a module document; tokenCount is estimated from the document itself with tokenCount=0."""
    document = ModuleDocument(
        module=module.id,
        label=module.label,
        version=version,
        generated_at=generated_at or utc_timestamp(),
        endpoints=endpoints_for_module(endpoints, module),
        token_count=0,
    )
    return document.model_copy(update={"token_count": estimate_tokens(document)})


def build_metadata(
    documents: list[ModuleDocument],
    version: str,
    source: str,
    generated_at: str | None = None,
) -> Metadata:
    return Metadata(
        version=version,
        source=source,
        generated_at=generated_at or utc_timestamp(),
        modules=[
            ModuleFileInfo(
                id=doc.module,
                file=f"{MODULES_DIRNAME}/{doc.module}.json",
                endpoint_count=len(doc.endpoints),
                token_count=doc.token_count,
            )
            for doc in documents
        ],
    )


def write_outputs(
    output_dir: Path,
    endpoints: list[ApiEndpoint],
    modules: tuple[ModuleDefinition, ...],
    version: str,
    source: str,
    spec: dict | None = None,
    generated_at: str | None = None,
) -> BuildReport:
    """Build every artifact in memory, then write them under output_dir."""
    generated_at = generated_at or utc_timestamp()

    index = build_index(endpoints, modules, version, source, generated_at)
    documents = [build_module_document(mod, endpoints, version, generated_at) for mod in modules]
    metadata = build_metadata(documents, version, source, generated_at)
    markdown = render_markdown_index(endpoints, modules, version, source, generated_at)

    modules_dir = output_dir / MODULES_DIRNAME
    modules_dir.mkdir(parents=True, exist_ok=True)

    _write_json(output_dir / INDEX_FILENAME, index)
    for doc in documents:
        _write_json(modules_dir / f"{doc.module}.json", doc)
    _write_json(output_dir / METADATA_FILENAME, metadata)
    (output_dir / MARKDOWN_FILENAME).write_text(markdown, encoding="utf-8")

    return BuildReport(
        output_dir=output_dir,
        total_endpoints=len(endpoints),
        index_tokens=estimate_tokens(index),
        module_tokens={doc.module: doc.token_count for doc in documents},
        module_counts={doc.module: len(doc.endpoints) for doc in documents},
        unassigned_count=len(unassigned_endpoints(endpoints, modules)),
        spec_tokens=estimate_tokens(spec) if spec is not None else None,
    )


def _write_json(path: Path, model: WireModel) -> None:
    path.write_text(json.dumps(model.to_wire(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

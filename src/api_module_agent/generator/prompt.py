"""Prompt assembler: renders module endpoints and project context into one text block.

Rendering is deterministic: the same module, endpoints and description
always produce the same text. When no module context is available the
simple template is used.
"""

from dataclasses import dataclass

from api_module_agent.client.module_client import ModuleClient
from api_module_agent.config import ProjectContext
from api_module_agent.errors import ModuleFetchError
from api_module_agent.modules import DEFAULT_MODULES, ModuleDefinition, get_module_by_id
from api_module_agent.parser.base import ApiEndpoint
from api_module_agent.tokens import estimate_tokens


@dataclass(frozen=True)
class PromptResult:
    text: str
    estimated_tokens: int
    has_module_context: bool
    error: str | None = None


def format_endpoint(endpoint: ApiEndpoint) -> str:
    """Summarize one endpoint as a short Markdown block."""
    lines = [f"**{endpoint.method} {endpoint.path}**"]
    if endpoint.operation_id:
        lines.append(f"- operationId: `{endpoint.operation_id}`")
    if endpoint.summary:
        lines.append(f"- {endpoint.summary}")
    if endpoint.parameters:
        params = ", ".join(
            f"`{p.name}` ({p.location}){' (required)' if p.required else ''}" for p in endpoint.parameters
        )
        lines.append(f"- Params: {params}")
    if endpoint.request_body is not None:
        lines.append("- Has request body: yes")
    return "\n".join(lines)


def build_prompt(
    module_label: str,
    endpoints: list[ApiEndpoint],
    description: str,
    context: ProjectContext | None = None,
) -> str:
    """Enriched prompt: project context, the module's endpoints, the task, the notes."""
    context = context or ProjectContext()
    endpoints_block = "\n\n".join(format_endpoint(ep) for ep in endpoints)
    return (
        f"{_project_header(context)}\n\n"
        f"## API disponible - Módulo: {module_label}\n\n"
        "Los siguientes endpoints están disponibles para implementar esta funcionalidad:\n\n"
        "### Endpoints\n\n"
        f"{endpoints_block}\n\n"
        "---\n\n"
        f"{_task_and_notes(description, context)}"
    ).strip()


def build_simple_prompt(description: str, context: ProjectContext | None = None) -> str:
    """Prompt without API context, used when no module is loaded."""
    context = context or ProjectContext()
    return f"{_project_header(context)}\n\n---\n\n{_task_and_notes(description, context)}".strip()


def assemble_prompt(
    module_id: str | None,
    endpoints: list[ApiEndpoint] | None,
    description: str,
    context: ProjectContext | None = None,
    modules: tuple[ModuleDefinition, ...] = DEFAULT_MODULES,
) -> str:
    if not module_id or not endpoints:
        return build_simple_prompt(description, context)
    module = get_module_by_id(module_id, modules)
    label = module.label if module is not None else module_id
    return build_prompt(label, endpoints, description, context)


def generate_prompt(
    client: ModuleClient,
    module_id: str | None,
    description: str,
    context: ProjectContext | None = None,
    modules: tuple[ModuleDefinition, ...] = DEFAULT_MODULES,
) -> PromptResult:
    """Fetch the module (if any) and render the prompt, degrading to the simple template."""
    if not description.strip():
        return PromptResult(text="", estimated_tokens=0, has_module_context=False)

    endpoints: list[ApiEndpoint] = []
    error = None
    if module_id:
        try:
            document = client.get(module_id)
        except ModuleFetchError as exc:
            error = str(exc)
        else:
            if document is not None:
                endpoints = list(document.endpoints)

    text = assemble_prompt(module_id, endpoints, description, context or client.settings.project, modules)
    return PromptResult(
        text=text,
        estimated_tokens=estimate_tokens(text),
        has_module_context=bool(module_id and endpoints),
        error=error,
    )


def _project_header(context: ProjectContext) -> str:
    return (
        "## Contexto del proyecto\n\n"
        f"Este proyecto es **{context.name}**, una aplicación {context.framework}.\n\n"
        f"Para instrucciones detalladas de desarrollo, consulta `{context.guide_reference}` "
        "en la raíz del proyecto."
    )


def _task_and_notes(description: str, context: ProjectContext) -> str:
    notes = "\n".join(f"- {note}" for note in context.notes)
    return f"## Tarea solicitada\n\n{description}\n\n---\n\n## Notas importantes\n\n{notes}\n"

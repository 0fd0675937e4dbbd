"""Human-readable Markdown rendering of the module partition."""

from api_module_agent.modules import ModuleDefinition
from api_module_agent.parser.base import ApiEndpoint


def render_markdown_index(
    endpoints: list[ApiEndpoint],
    modules: tuple[ModuleDefinition, ...],
    version: str,
    source: str,
    generated_at: str,
) -> str:
    """Render one table per non-empty module, then the endpoints no module claims."""
    lines = [
        f"# API Index - v{version}",
        "",
        f"Source: {source}",
        f"Generated: {generated_at}",
        "",
        f"Total endpoints: {len(endpoints)}",
        "",
    ]

    for mod in modules:
        module_endpoints = [ep for ep in endpoints if mod.owns(ep)]
        if not module_endpoints:
            continue
        lines += [f"## {mod.label}", "", "| Method | Path | Summary |", "|--------|------|---------|"]
        for ep in module_endpoints:
            lines.append(f"| {ep.method} | `{ep.path}` | {_cell(ep.summary)} |")
        lines.append("")

    unassigned = [ep for ep in endpoints if not any(m.owns(ep) for m in modules)]
    if unassigned:
        lines += [
            "## Unassigned",
            "",
            "| Method | Path | Tags | Summary |",
            "|--------|------|------|---------|",
        ]
        for ep in unassigned:
            tags = ", ".join(ep.tags) if ep.tags else "-"
            lines.append(f"| {ep.method} | `{ep.path}` | {tags} | {_cell(ep.summary)} |")
        lines.append("")

    return "\n".join(lines)


def _cell(text: str | None) -> str:
    return text.replace("|", "\\|") if text else "-"

"""Module definitions: the hand-curated tag partition of the API.

Membership is non-exclusive. An endpoint belongs to every module whose tag
set intersects its own tags, and to none if nothing matches.
"""

from pathlib import Path

import yaml
from pydantic import Field, ValidationError

from api_module_agent.config import ConfigError
from api_module_agent.parser.base import ApiEndpoint, WireModel


class ModuleDefinition(WireModel):
    """A named, tag-defined partition of the API's endpoints."""

    id: str
    label: str
    description: str = ""
    tags: tuple[str, ...]
    estimated_tokens: int = Field(default=0, alias="estimatedTokens")

    def owns(self, endpoint: ApiEndpoint) -> bool:
        return not set(self.tags).isdisjoint(endpoint.tags)


DEFAULT_MODULES: tuple[ModuleDefinition, ...] = (
    ModuleDefinition(
        id="paia-ai",
        label="PAIA & AI",
        description="Asistentes de IA, opciones, productos y generación de prompts",
        tags=("AssistantOptions", "AssistantProducts", "CustomAssistants", "GeneralAi", "Paia"),
        estimated_tokens=3500,
    ),
    ModuleDefinition(
        id="auditor",
        label="Auditor",
        description="Auditoría de agentes, transcripciones y reportes",
        tags=("Auditor", "AgentAuditor"),
        estimated_tokens=5500,
    ),
    ModuleDefinition(
        id="dynamic-queues",
        label="Dynamic Queues",
        description="Colas dinámicas, reglas, turnos y prioridades",
        tags=("DynamicQueues", "DynamicQueuesChangelog"),
        estimated_tokens=6000,
    ),
    ModuleDefinition(
        id="integrations",
        label="Integrations",
        description="HubSpot, Salesforce, scheduling y campañas",
        tags=("HubSpot", "Schedules", "Campana"),
        estimated_tokens=5000,
    ),
    ModuleDefinition(
        id="infrastructure",
        label="Infrastructure",
        description="PBX MyFlex, DIDs, media y productos",
        tags=("MyflexPbx", "Media", "Products"),
        estimated_tokens=3000,
    ),
    ModuleDefinition(
        id="system",
        label="System",
        description="Endpoints de sistema, health checks y monitoring",
        tags=("ApiCheck", "HelpCenter", "MonitoringPanel"),
        estimated_tokens=2000,
    ),
)


def get_module_by_id(
    module_id: str, modules: tuple[ModuleDefinition, ...] = DEFAULT_MODULES
) -> ModuleDefinition | None:
    return next((m for m in modules if m.id == module_id), None)


def get_module_by_tag(
    tag: str, modules: tuple[ModuleDefinition, ...] = DEFAULT_MODULES
) -> ModuleDefinition | None:
    """Return the first module that lists the tag."""
    return next((m for m in modules if tag in m.tags), None)


def load_module_definitions(file_path: Path) -> tuple[ModuleDefinition, ...]:
    """Load module definitions from a YAML file.

    The file holds either a list of modules or a mapping with a `modules` list.
    Each entry needs `id`, `label` and `tags`.
    """
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {file_path.name}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("modules")
    if not isinstance(data, list) or not data:
        raise ConfigError(f"{file_path.name} must contain a non-empty list of modules")

    try:
        modules = tuple(ModuleDefinition.model_validate(item) for item in data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid module definition in {file_path.name}: {exc}") from exc

    ids = [m.id for m in modules]
    if len(ids) != len(set(ids)):
        raise ConfigError(f"Duplicate module ids in {file_path.name}")
    return modules

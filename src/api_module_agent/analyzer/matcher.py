"""Description analyzer: detects endpoints a task description needs but the API lacks.

The judgement is a keyword heuristic. A description is only checked when it
contains at least one recognised action verb and one recognised entity
noun; otherwise it is reported as complete. Both missed gaps and spurious
gaps from coincidental keywords are expected.
"""

import re
from dataclasses import dataclass

from pydantic import Field

from api_module_agent.analyzer.keywords import ACTION_METHODS, ENTITY_PATHS
from api_module_agent.parser.base import ApiEndpoint, WireModel

_NON_WORD = re.compile(r"[^a-záéíóúñ]")

ISSUE_TEMPLATE = """## Endpoint requerido

**Método:** {method}
**Path sugerido:** {path}

## Descripción

Se necesita un endpoint para {action} {entity}.

## Contexto

La tarea de desarrollo descrita requiere esta funcionalidad y no se
encontró un endpoint equivalente en la API actual del proyecto.

## Especificación sugerida

- Request body: por definir según requerimientos
- Response: por definir según requerimientos
- Autenticación: Bearer token (estándar)

---
*Generado automáticamente por api-module-agent*"""


class MissingEndpointInfo(WireModel):
    """A ready-to-file issue draft for an endpoint the description implies."""

    description: str
    suggested_method: str = Field(alias="suggestedMethod")
    suggested_path: str = Field(alias="suggestedPath")
    reason: str
    jira_description: str = Field(alias="jiraDescription")


class AnalysisResult(WireModel):
    is_complete: bool = Field(alias="isComplete")
    matched_endpoints: list[ApiEndpoint] = Field(default=[], alias="matchedEndpoints")
    missing_endpoints: list[MissingEndpointInfo] = Field(default=[], alias="missingEndpoints")

    @classmethod
    def complete(cls) -> "AnalysisResult":
        """The conservative default: complete, nothing matched, nothing missing."""
        return cls(is_complete=True)


@dataclass(frozen=True)
class Action:
    word: str
    methods: tuple[str, ...]


@dataclass(frozen=True)
class Entity:
    word: str
    paths: tuple[str, ...]


def clean_token(word: str) -> str:
    """Lower-case a token and strip everything but Latin letters, accented vowels and ñ."""
    return _NON_WORD.sub("", word.lower())


def extract_actions(description: str) -> list[Action]:
    tokens = (clean_token(word) for word in description.split())
    return [Action(token, ACTION_METHODS[token]) for token in tokens if token in ACTION_METHODS]


def extract_entities(description: str) -> list[Entity]:
    tokens = (clean_token(word) for word in description.split())
    return [Entity(token, ENTITY_PATHS[token]) for token in tokens if token in ENTITY_PATHS]


def endpoint_matches(endpoint: ApiEndpoint, methods: tuple[str, ...], entity_paths: tuple[str, ...]) -> bool:
    if endpoint.method not in methods:
        return False
    path = endpoint.path.lower()
    return any(fragment in path for fragment in entity_paths)


def analyze_description(description: str, available_endpoints: list[ApiEndpoint]) -> AnalysisResult:
    """Match every action x entity pair in the description against the endpoints."""
    actions = extract_actions(description)
    entities = extract_entities(description)
    if not actions or not entities:
        return AnalysisResult.complete()

    matched: list[ApiEndpoint] = []
    matched_ids: set[tuple[str, str]] = set()
    missing: list[MissingEndpointInfo] = []
    checked: set[tuple[str, str]] = set()

    for action in actions:
        for entity in entities:
            key = (action.methods[0], entity.paths[0])
            if key in checked:
                continue
            checked.add(key)

            found = next(
                (ep for ep in available_endpoints if endpoint_matches(ep, action.methods, entity.paths)),
                None,
            )
            if found is not None:
                if found.identity not in matched_ids:
                    matched_ids.add(found.identity)
                    matched.append(found)
            else:
                missing.append(_missing_endpoint(action, entity))

    return AnalysisResult(is_complete=not missing, matched_endpoints=matched, missing_endpoints=missing)


def _missing_endpoint(action: Action, entity: Entity) -> MissingEndpointInfo:
    method = action.methods[0]
    path = f"/{entity.paths[0]}"
    return MissingEndpointInfo(
        description=f"Endpoint para {action.word} {entity.word}",
        suggested_method=method,
        suggested_path=path,
        reason=f"No se encontró endpoint {method} para {entity.word}",
        jira_description=ISSUE_TEMPLATE.format(method=method, path=path, action=action.word, entity=entity.word),
    )

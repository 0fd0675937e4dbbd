"""OpenAPI endpoint extraction.

Flattens the `paths` mapping of an OpenAPI document into ApiEndpoint
records, one per (path, verb) pair, in document order. The result is
deliberately lossy: descriptions are truncated and parameter schemas are
reduced to their scalar type to keep module documents small.
"""

from api_module_agent.errors import MalformedSpecError
from api_module_agent.parser.base import ApiEndpoint, Param, RequestBodyRef

SUPPORTED_VERBS = ("get", "post", "put", "delete", "patch")

MAX_DESCRIPTION_LENGTH = 200


def extract_endpoints(spec: dict) -> list[ApiEndpoint]:
    """Extract every supported operation from a decoded OpenAPI document."""
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        raise MalformedSpecError("Specification has no 'paths' mapping")

    endpoints = []
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for verb, operation in path_item.items():
            operation = operation or {}
            if verb.lower() not in SUPPORTED_VERBS or not isinstance(operation, dict):
                continue
            endpoints.append(_parse_operation(str(path), verb, operation))

    return endpoints


def spec_version(spec: dict) -> str:
    info = spec.get("info")
    if isinstance(info, dict) and info.get("version") is not None:
        return str(info["version"])
    return "unknown"


def _parse_operation(path: str, verb: str, operation: dict) -> ApiEndpoint:
    summary = operation.get("summary")
    description = operation.get("description")
    if not description or description == summary:
        description = None
    else:
        description = description[:MAX_DESCRIPTION_LENGTH]

    return ApiEndpoint(
        operation_id=operation.get("operationId") or f"{verb}_{path}",
        method=verb.upper(),
        path=path,
        summary=summary,
        description=description,
        tags=operation.get("tags") or [],
        parameters=_parse_parameters(operation.get("parameters")),
        request_body=_parse_request_body(operation.get("requestBody")),
    )


def _parse_parameters(params: list[dict] | None) -> list[Param] | None:
    if not params:
        return None
    result = []
    for p in params:
        schema = p.get("schema") or {}
        result.append(
            Param(
                name=p.get("name", ""),
                location=p.get("in", "query"),
                required=p.get("required"),
                type=schema.get("type"),
            )
        )
    return result


def _parse_request_body(body: dict | None) -> RequestBodyRef | None:
    if body is None:
        return None
    content = body.get("content") or {}
    schema = (content.get("application/json") or {}).get("schema") or {}
    return RequestBodyRef(required=body.get("required"), schema_ref=_schema_name(schema.get("$ref")))


def _schema_name(ref: str | None) -> str | None:
    if not ref:
        return None
    return ref.split("/")[-1]

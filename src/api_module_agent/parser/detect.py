"""Decode raw API specification text and describe what was loaded."""

import json

import yaml

from api_module_agent.errors import MalformedSpecError


def parse_spec_text(text: str, origin: str) -> dict:
    """Decode a JSON or YAML specification document.

    Raises MalformedSpecError if the text is neither, or if the root is not a mapping.
    """
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise MalformedSpecError(f"{origin} is not valid JSON or YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedSpecError(f"{origin} does not contain an API document")
    return data


def detect_format(spec: dict) -> str:
    """Return 'openapi', 'swagger' or 'unknown' for a decoded document."""
    if "openapi" in spec:
        return "openapi"
    if "swagger" in spec:
        return "swagger"
    return "unknown"


def describe_spec(spec: dict) -> str:
    """One-line description like 'OpenAPI 3.0.1 - Manage API v2.4.0'."""
    info = spec.get("info") if isinstance(spec.get("info"), dict) else {}
    fmt = detect_format(spec)
    label = {"openapi": "OpenAPI", "swagger": "Swagger"}.get(fmt, "API document")
    head = f"{label} {spec[fmt]}" if fmt != "unknown" else label
    return f"{head} - {info.get('title', 'untitled')} v{info.get('version', 'unknown')}"

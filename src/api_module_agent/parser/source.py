"""Two-tier specification lookup: remote document first, local file as fallback.

A remote failure (timeout, connection error, non-2xx status, undecodable
body) is never raised from here on its own. It either triggers the local
fallback or, with `force_remote`, becomes a SourceUnavailableError.
There are no retries.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import requests

from api_module_agent.errors import MalformedSpecError, SourceUnavailableError
from api_module_agent.logging import get_logger
from api_module_agent.parser.detect import parse_spec_text

DEFAULT_TIMEOUT = 10.0
MAX_REDIRECTS = 5

logger = get_logger("source")


@dataclass(frozen=True)
class ResolvedSpec:
    """The decoded specification and which tier produced it."""

    spec: dict
    source: Literal["remote", "local"]


def resolve_spec(
    remote_url: str | None,
    local_path: Path,
    *,
    force_local: bool = False,
    force_remote: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
) -> ResolvedSpec:
    """Obtain the raw specification, preferring the remote copy."""
    if force_local:
        logger.info("Using local specification %s (forced)", local_path)
        return ResolvedSpec(spec=read_local_spec(local_path), source="local")

    remote_error = "no remote URL configured"
    if remote_url:
        logger.info("Fetching specification from %s", remote_url)
        try:
            spec = fetch_remote_spec(remote_url, timeout=timeout)
        except (requests.RequestException, MalformedSpecError) as exc:
            remote_error = str(exc)
            logger.warning("Remote specification unavailable: %s", remote_error)
        else:
            return ResolvedSpec(spec=spec, source="remote")

    if force_remote:
        raise SourceUnavailableError(f"Remote specification unavailable ({remote_error}) and force-remote is set")

    logger.info("Falling back to local specification %s", local_path)
    try:
        spec = read_local_spec(local_path)
    except SourceUnavailableError as exc:
        raise SourceUnavailableError(
            f"Could not obtain the specification from remote ({remote_error}) or local ({exc})"
        ) from exc
    return ResolvedSpec(spec=spec, source="local")


def fetch_remote_spec(url: str, timeout: float = DEFAULT_TIMEOUT) -> dict:
    """GET a JSON specification, following a bounded number of redirects."""
    with requests.Session() as session:
        session.max_redirects = MAX_REDIRECTS
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        return parse_spec_text(response.text, url)


def read_local_spec(file_path: Path) -> dict:
    """Read and decode a local specification file."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceUnavailableError(f"Cannot read {file_path}: {exc.strerror or exc}") from exc
    return parse_spec_text(text, str(file_path))

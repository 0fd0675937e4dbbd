"""Runtime client that fetches module documents on demand.

Each fetch takes a generation number when it is issued. Issuing another
request (a different module, a refresh, or an explicit cancel) supersedes
every older generation, and a superseded fetch drops its result: it never
touches the cache or the client state and never raises, success or failure.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable

import requests

from api_module_agent.client.cache import ModuleCache
from api_module_agent.config import Settings
from api_module_agent.errors import ModuleFetchError
from api_module_agent.generator.partition import Metadata
from api_module_agent.logging import get_logger
from api_module_agent.parser.base import ApiEndpoint, ModuleDocument

logger = get_logger("client")

Fetcher = Callable[[str, float], object]


def http_fetch_json(url: str, timeout: float) -> object:
    """GET a JSON document; non-2xx responses raise requests.HTTPError."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


@dataclass
class ModuleState:
    """What the client currently exposes for the selected module."""

    module_id: str | None = None
    endpoints: list[ApiEndpoint] = field(default_factory=list)
    token_count: int = 0
    loading: bool = False
    error: str | None = None


class ModuleClient:
    """Fetches, caches and tracks the current module document."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: ModuleCache | None = None,
        fetch: Fetcher | None = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.cache = cache if cache is not None else ModuleCache(stale_ms=self.settings.cache_stale_ms)
        self._fetch = fetch or http_fetch_json
        self._generation = 0
        self._lock = threading.Lock()
        self.state = ModuleState()

    def get(self, module_id: str | None, force_refresh: bool = False) -> ModuleDocument | None:
        """Return the module document, from cache when fresh.

        Returns None when no module is selected or when this call was
        superseded before its fetch completed. Raises ModuleFetchError when
        the fetch fails and is still current.
        """
        generation = self._supersede()
        if module_id is None:
            with self._lock:
                self.state = ModuleState()
            return None

        if not force_refresh:
            entry = self.cache.lookup(module_id)
            if entry is not None:
                logger.debug("Module %s served from cache", module_id)
                with self._lock:
                    self.state = self._state_for(module_id, entry.data)
                return entry.data

        with self._lock:
            self.state = ModuleState(module_id=module_id, loading=True)

        url = self.settings.module_url(module_id)
        logger.info("Fetching module %s from %s", module_id, url)
        try:
            document = ModuleDocument.model_validate(self._fetch(url, self.settings.request_timeout))
        except (requests.RequestException, ValueError) as exc:
            with self._lock:
                if generation != self._generation:
                    logger.debug("Discarding failure of superseded fetch for %s", module_id)
                    return None
                self.state = ModuleState(module_id=module_id, error=str(exc))
            logger.warning("Module %s fetch failed: %s", module_id, exc)
            raise ModuleFetchError(module_id, str(exc)) from exc

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding superseded fetch for %s", module_id)
                return None
            self.cache.store(module_id, document)
            self.state = self._state_for(module_id, document)
        return document

    def refresh(self) -> ModuleDocument | None:
        """Re-fetch the current module, bypassing the cache."""
        return self.get(self.state.module_id, force_refresh=True)

    def cancel(self) -> None:
        """Supersede any in-flight fetch without issuing a new one."""
        self._supersede()
        with self._lock:
            self.state.loading = False

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_metadata(self) -> Metadata:
        """Fetch metadata.json listing every module file with its counts."""
        url = self.settings.metadata_url()
        try:
            return Metadata.model_validate(self._fetch(url, self.settings.request_timeout))
        except (requests.RequestException, ValueError) as exc:
            raise ModuleFetchError("metadata", str(exc)) from exc

    def _supersede(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _state_for(self, module_id: str, document: ModuleDocument) -> ModuleState:
        return ModuleState(
            module_id=module_id,
            endpoints=list(document.endpoints),
            token_count=document.token_count,
        )

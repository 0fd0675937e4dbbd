"""Debounced description analysis bound to the selected module.

Every `update` takes a new version number and cancels the delayed task of
the previous one. A task only publishes its result if its version is still
the latest, so a slow analysis can never overwrite a newer one.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable

from api_module_agent.analyzer.matcher import AnalysisResult, analyze_description
from api_module_agent.client.module_client import ModuleClient
from api_module_agent.config import Settings
from api_module_agent.errors import ModuleFetchError
from api_module_agent.logging import get_logger
from api_module_agent.parser.base import ApiEndpoint

MIN_DESCRIPTION_LENGTH = 10

logger = get_logger("analyzer")


@dataclass
class AnalysisState:
    is_analyzing: bool = False
    result: AnalysisResult = field(default_factory=AnalysisResult.complete)
    error: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.result.is_complete


class ImmediateTimer:
    """threading.Timer look-alike that runs its task on start(), ignoring the interval.

    Used by one-shot callers such as the CLI, where there is no stream of
    keystrokes to debounce.
    """

    def __init__(self, interval: float, function: Callable[..., None], args: tuple = ()):
        self.interval = interval
        self.function = function
        self.args = args
        self.cancelled = False

    def start(self) -> None:
        if not self.cancelled:
            self.function(*self.args)

    def cancel(self) -> None:
        self.cancelled = True


class AnalysisSession:
    """Runs the analyzer for the latest description after a quiet period.

    `timer_factory` must build an object with start() and cancel() from
    (interval_seconds, function, args=...), the threading.Timer signature.
    """

    def __init__(
        self,
        client: ModuleClient,
        settings: Settings | None = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        on_change: Callable[[AnalysisState], None] | None = None,
        analyze: Callable[[str, list[ApiEndpoint]], AnalysisResult] = analyze_description,
    ):
        self.client = client
        self.settings = settings if settings is not None else client.settings
        self._timer_factory = timer_factory
        self._on_change = on_change
        self._analyze = analyze
        self._version = 0
        self._timer = None
        self._lock = threading.Lock()
        self.state = AnalysisState()

    def update(self, module_id: str | None, description: str) -> int:
        """Register a new description for the module; returns its version."""
        version = self._next_version()

        if not self.settings.analysis_enabled or not module_id:
            self._publish(version, AnalysisState())
            return version

        if len(description.strip()) < MIN_DESCRIPTION_LENGTH:
            self._publish(version, AnalysisState())
            return version

        try:
            document = self.client.get(module_id)
        except ModuleFetchError as exc:
            self._publish(version, AnalysisState(error=str(exc)))
            return version
        if document is None:
            return version

        with self._lock:
            if version != self._version:
                return version
            self.state = AnalysisState(is_analyzing=True, result=self.state.result)
            self._timer = self._timer_factory(
                self.settings.debounce_ms / 1000,
                self._run,
                args=(version, description, list(document.endpoints)),
            )
            timer = self._timer
        timer.start()
        return version

    def cancel(self) -> None:
        """Drop any pending analysis."""
        self._next_version()
        with self._lock:
            self.state.is_analyzing = False

    def _run(self, version: int, description: str, endpoints: list[ApiEndpoint]) -> None:
        try:
            state = AnalysisState(result=self._analyze(description, endpoints))
        except Exception as exc:
            logger.exception("Description analysis failed")
            state = AnalysisState(error=str(exc) or "Analysis failed")
        self._publish(version, state)

    def _next_version(self) -> int:
        with self._lock:
            self._version += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return self._version

    def _publish(self, version: int, state: AnalysisState) -> bool:
        with self._lock:
            if version != self._version:
                logger.debug("Dropping analysis result for stale version %d", version)
                return False
            self.state = state
            self._timer = None
        if self._on_change is not None:
            self._on_change(state)
        return True

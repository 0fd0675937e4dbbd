"""Exception types raised by the partitioner and the runtime client."""


class ApiModuleError(Exception):
    """Base class for api-module-agent failures."""


class SourceUnavailableError(ApiModuleError):
    """Neither the remote nor the local specification could be obtained."""


class MalformedSpecError(ApiModuleError):
    """The specification could not be parsed or has no `paths` mapping."""


class ModuleFetchError(ApiModuleError):
    """A module document could not be fetched or decoded."""

    def __init__(self, module_id: str, message: str):
        super().__init__(f"Failed to fetch module '{module_id}': {message}")
        self.module_id = module_id


class LlmReplyError(ApiModuleError):
    """The model answered a dispatched prompt with no content."""

"""Configuration loading for api-module-agent (.apimodules.yml + environment)."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

CONFIG_FILENAME = ".apimodules.yml"

DEFAULT_SPEC_URL = "https://picallex-openapi.s3.amazonaws.com/openapi.json"
DEFAULT_BASE_URL = "https://picallex-openapi.s3.amazonaws.com"

ENV_SPEC_URL = "API_MODULES_SPEC_URL"
ENV_BASE_URL = "API_MODULES_BASE_URL"
ENV_LOCAL_SPEC = "API_MODULES_LOCAL_SPEC"

DEFAULT_NOTES = (
    "Proxy API: todas las llamadas al backend Laravel deben pasar por `/pages/api/`",
    "Auth: utiliza `callLaravel` de `@/lib/auth` para llamadas autenticadas",
    "i18n: sigue las convenciones de internacionalización del proyecto",
    "Dark mode: respeta el contexto de tema del módulo correspondiente",
)


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be parsed."""


@dataclass
class ProjectContext:
    """Fixed project boilerplate injected into every prompt."""

    name: str = "picallex-manage"
    framework: str = "Next.js 15 con backend Laravel"
    guide_reference: str = "CLAUDE.md"
    notes: list[str] = field(default_factory=lambda: list(DEFAULT_NOTES))


@dataclass
class Settings:
    """Build-time and runtime options."""

    spec_url: str | None = DEFAULT_SPEC_URL
    local_spec: Path = Path("../picallex-manage/openapi.json")
    output_dir: Path = Path("api-modules")
    modules_file: Path | None = None
    base_url: str = DEFAULT_BASE_URL
    analysis_enabled: bool = True
    debounce_ms: int = 500
    cache_stale_ms: int = 5 * 60 * 1000
    request_timeout: float = 10.0
    project: ProjectContext = field(default_factory=ProjectContext)

    def module_url(self, module_id: str) -> str:
        return f"{self.base_url.rstrip('/')}/modules/{module_id}.json"

    def metadata_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/metadata.json"


def load_settings(config_path: Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from defaults, an optional config file, then environment variables.

    `config_path` may point at the file itself or at the directory holding it.
    A missing file is not an error.
    """
    settings = Settings()
    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        if config_file.exists():
            _apply_file(settings, _read_config(config_file), config_file.parent)

    _apply_env(settings, os.environ if env is None else env)
    return settings


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return config_path / CONFIG_FILENAME
    return config_path


def _read_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _apply_file(settings: Settings, data: dict[str, Any], root: Path) -> None:
    spec = _as_dict(data.get("spec"))
    if "url" in spec:
        settings.spec_url = _as_str(spec["url"])
    if _as_str(spec.get("local")):
        settings.local_spec = root / spec["local"]
    if _as_str(spec.get("output")):
        settings.output_dir = root / spec["output"]
    if _as_str(spec.get("modules_file")):
        settings.modules_file = root / spec["modules_file"]

    runtime = _as_dict(data.get("runtime"))
    if _as_str(runtime.get("base_url")):
        settings.base_url = runtime["base_url"]
    if "analysis_enabled" in runtime:
        settings.analysis_enabled = _as_bool(runtime["analysis_enabled"], "runtime.analysis_enabled")
    if "debounce_ms" in runtime:
        settings.debounce_ms = _as_int(runtime["debounce_ms"], "runtime.debounce_ms")
    if "cache_stale_ms" in runtime:
        settings.cache_stale_ms = _as_int(runtime["cache_stale_ms"], "runtime.cache_stale_ms")
    if "request_timeout" in runtime:
        settings.request_timeout = _as_float(runtime["request_timeout"], "runtime.request_timeout")

    project = _as_dict(data.get("project"))
    if _as_str(project.get("name")):
        settings.project.name = project["name"]
    if _as_str(project.get("framework")):
        settings.project.framework = project["framework"]
    if _as_str(project.get("guide_reference")):
        settings.project.guide_reference = project["guide_reference"]
    if "notes" in project:
        notes = project["notes"] or []
        if not isinstance(notes, list):
            raise ConfigError("project.notes must be a list of strings")
        settings.project.notes = [str(note) for note in notes]


def _apply_env(settings: Settings, env: Mapping[str, str]) -> None:
    if env.get(ENV_SPEC_URL):
        settings.spec_url = env[ENV_SPEC_URL]
    if env.get(ENV_BASE_URL):
        settings.base_url = env[ENV_BASE_URL]
    if env.get(ENV_LOCAL_SPEC):
        settings.local_spec = Path(env[ENV_LOCAL_SPEC])


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "yes", "on", "1"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "no", "off", "0"):
        return False
    raise ConfigError(f"{key} must be a boolean")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer") from exc


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number") from exc

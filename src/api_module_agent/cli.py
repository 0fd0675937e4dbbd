"""CLI entry point for api-module-agent."""

import json
from pathlib import Path

import click

from api_module_agent.analyzer.matcher import analyze_description
from api_module_agent.analyzer.session import AnalysisSession, ImmediateTimer
from api_module_agent.client.module_client import ModuleClient
from api_module_agent.config import ConfigError, Settings, load_settings
from api_module_agent.errors import ApiModuleError
from api_module_agent.generator.partition import write_outputs
from api_module_agent.generator.prompt import generate_prompt
from api_module_agent.llm import LlmClient
from api_module_agent.logging import configure_logging
from api_module_agent.modules import DEFAULT_MODULES, ModuleDefinition, load_module_definitions
from api_module_agent.parser.detect import describe_spec
from api_module_agent.parser.source import resolve_spec
from api_module_agent.parser.swagger import extract_endpoints, spec_version


def _load_modules(settings: Settings) -> tuple[ModuleDefinition, ...]:
    if settings.modules_file is None:
        return DEFAULT_MODULES
    return load_module_definitions(settings.modules_file)


@click.group()
@click.option("--config", "config_path", default=".", type=click.Path(path_type=Path), help="Config file, or directory holding .apimodules.yml.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--log-file", default=None, type=click.Path(path_type=Path), help="Also write log records to this file.")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool, log_file: Path | None):
    """API Module Agent: partition an OpenAPI spec into prompt-sized modules and detect missing endpoints."""
    configure_logging(verbose=verbose, log_file=log_file)
    try:
        ctx.obj = load_settings(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.option("--remote-url", default=None, help="Remote URL of the OpenAPI document.")
@click.option("--local", "local_path", default=None, type=click.Path(path_type=Path), help="Local OpenAPI file used as fallback.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output directory.")
@click.option("--modules", "modules_file", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with module definitions.")
@click.option("--force-local", is_flag=True, help="Skip the remote source.")
@click.option("--force-remote", is_flag=True, help="Fail instead of falling back to the local file.")
@click.pass_obj
def build(
    settings: Settings,
    remote_url: str | None,
    local_path: Path | None,
    output: Path | None,
    modules_file: Path | None,
    force_local: bool,
    force_remote: bool,
):
    """Generate api-index.json, metadata.json, API-INDEX.md and modules/*.json."""
    if force_local and force_remote:
        raise click.UsageError("--force-local and --force-remote are mutually exclusive.")
    if modules_file is not None:
        settings.modules_file = modules_file
    output_dir = output or settings.output_dir

    try:
        modules = _load_modules(settings)
        resolved = resolve_spec(
            remote_url or settings.spec_url,
            local_path or settings.local_spec,
            force_local=force_local,
            force_remote=force_remote,
            timeout=settings.request_timeout,
        )
        click.echo(f"Loaded {describe_spec(resolved.spec)} (source: {resolved.source})")
        endpoints = extract_endpoints(resolved.spec)
        click.echo(f"Found {len(endpoints)} endpoints.")
        report = write_outputs(
            output_dir,
            endpoints,
            modules,
            spec_version(resolved.spec),
            resolved.source,
            spec=resolved.spec,
        )
    except (ApiModuleError, ConfigError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    for mod in modules:
        click.echo(
            f"  {mod.label}: {report.module_counts[mod.id]} endpoints (~{report.module_tokens[mod.id]} tokens)"
        )
    if report.unassigned_count:
        click.echo(f"  Unassigned: {report.unassigned_count} endpoints")
    click.echo(f"Index: ~{report.index_tokens} tokens; modules total: ~{report.total_module_tokens} tokens")
    if report.savings_percent is not None:
        click.echo(f"Full spec: ~{report.spec_tokens} tokens (index saves {report.savings_percent}%)")
    click.echo(f"Done! Files written to {output_dir}")


@main.command("modules")
@click.option("--remote", is_flag=True, help="Read endpoint and token counts from the published metadata.json.")
@click.option("--base-url", default=None, help="Where module documents are published.")
@click.pass_obj
def list_modules(settings: Settings, remote: bool, base_url: str | None):
    """List module definitions."""
    if base_url:
        settings.base_url = base_url
    try:
        if remote:
            metadata = ModuleClient(settings).get_metadata()
            click.echo(f"API v{metadata.version} (source: {metadata.source}, generated {metadata.generated_at})")
            for info in metadata.modules:
                click.echo(f"  {info.id}: {info.endpoint_count} endpoints (~{info.token_count} tokens) -> {info.file}")
            return
        for mod in _load_modules(settings):
            click.echo(f"  {mod.id} ({mod.label}): ~{mod.estimated_tokens} tokens, tags: {', '.join(mod.tags)}")
    except (ApiModuleError, ConfigError) as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.argument("description")
@click.option("-m", "--module", "module_id", required=True, help="Module id to check against.")
@click.option("--base-url", default=None, help="Where module documents are published.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_obj
def analyze(settings: Settings, description: str, module_id: str, base_url: str | None, as_json: bool):
    """Detect endpoints the DESCRIPTION needs that the module does not provide."""
    if base_url:
        settings.base_url = base_url

    session = AnalysisSession(
        ModuleClient(settings),
        settings=settings,
        timer_factory=ImmediateTimer,
        analyze=analyze_description,
    )
    session.update(module_id, description)
    if session.state.error:
        click.echo(f"Warning: {session.state.error}; no gaps reported.", err=True)
    result = session.state.result

    if as_json:
        click.echo(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))
        return

    for ep in result.matched_endpoints:
        click.echo(f"  found   {ep.method} {ep.path} ({ep.operation_id})")
    for missing in result.missing_endpoints:
        click.echo(f"  missing {missing.suggested_method} {missing.suggested_path}: {missing.reason}")
    if result.is_complete:
        click.echo("All required endpoints appear to exist.")
    else:
        click.echo(f"{len(result.missing_endpoints)} missing endpoint(s). Issue drafts:")
        for missing in result.missing_endpoints:
            click.echo("")
            click.echo(missing.jira_description)


@main.command()
@click.argument("description")
@click.option("-m", "--module", "module_id", default=None, help="Module id to include as API context.")
@click.option("--base-url", default=None, help="Where module documents are published.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the prompt to a file.")
@click.option("--send", is_flag=True, help="Send the prompt to the LLM and print the reply.")
@click.option("--model", default=None, help="LLM model to use with --send.")
@click.pass_obj
def prompt(
    settings: Settings,
    description: str,
    module_id: str | None,
    base_url: str | None,
    output: Path | None,
    send: bool,
    model: str | None,
):
    """Assemble a task prompt for DESCRIPTION, enriched with the module's endpoints."""
    if base_url:
        settings.base_url = base_url
    try:
        modules = _load_modules(settings)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    result = generate_prompt(ModuleClient(settings), module_id, description, settings.project, modules)
    if result.error:
        click.echo(f"Warning: {result.error}; using prompt without API context.", err=True)
    click.echo(f"Estimated tokens: ~{result.estimated_tokens}", err=True)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.text, encoding="utf-8")
        click.echo(f"Prompt saved to {output}", err=True)
    else:
        click.echo(result.text)

    if send and result.text:
        try:
            reply = LlmClient(model=model).send_prompt(result.text)
        except ApiModuleError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(reply)

"""Completion preview commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, NoReturn, Optional

import typer

from gh_complete.adapters.config_loader import load_config, load_default_config
from gh_complete.cli.commands.github import detect_repository, parse_repo_option
from gh_complete.core.models import CompletionResult, ProviderConfig, RepoCoordinates
from gh_complete.provider import GitHubSource
from gh_complete.render import render_json_report, render_markdown_report

logger = logging.getLogger("gh_complete")

CLI_SCOPE = "cli"

# command name -> (GitHubSource operation, default trigger, report title)
COMMANDS: dict[str, tuple[str, str, str]] = {
    "issues": ("get_issues", "#", "GitHub issues"),
    "prs": ("get_pull_requests", "#", "GitHub pull requests"),
    "mentions": ("get_mentions", "@", "GitHub mentions"),
    "all": ("get_issues_and_pull_requests", "#", "GitHub issues and pull requests"),
}


def make_command(name: str) -> Callable[..., None]:
    """Build the typer command function for one entry of :data:`COMMANDS`."""
    operation, default_trigger, title = COMMANDS[name]

    def run(
        repo: Optional[str] = typer.Option(
            None, "--repo", "-r", help="GitHub repo (owner/name). Defaults to the origin remote."
        ),
        host: str = typer.Option("github.com", "--host", help="Host used with --repo."),
        trigger: str = typer.Option(default_trigger, "--trigger", help="Trigger character."),
        limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum items to fetch."),
        state: Optional[str] = typer.Option(None, "--state", help="open, closed or all."),
        config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config YAML."),
        format: str = typer.Option("markdown", "--format", help="Output format: markdown or json."),
    ) -> None:
        if format not in ("markdown", "json"):
            _error(f"Unknown format: {format!r}. Use markdown or json.", 2)

        try:
            cfg = load_config(config) if config else load_default_config()
        except FileNotFoundError:
            _error(f"Config file not found: {config}", 2)
        except ValueError as exc:
            _error(f"Config validation error: {exc}", 2)

        try:
            coords = parse_repo_option(repo, host) if repo else detect_repository()
        except ValueError as exc:
            _error(str(exc), 2)

        overrides = {
            key: value for key, value in (("limit", limit), ("state", state)) if value is not None
        }
        if name == "all" and overrides:
            overrides = {"issues": overrides, "pull_requests": overrides}

        try:
            result = asyncio.run(collect(cfg, operation, coords, trigger, overrides))
        except ValueError as exc:
            _error(f"Invalid options: {exc}", 2)

        if result is None:
            _error(f"Unsupported repository: {coords.host}/{coords.owner}/{coords.repo}", 2)
        if not result:
            _error("Could not fetch items from gh or the GitHub API.", 1)

        if format == "json":
            typer.echo(render_json_report(result[0]), nl=False)
        else:
            typer.echo(render_markdown_report(result[0], title=f"{title} for {coords.full_name}"))

    run.__doc__ = f"Preview {title.lower()} completion items."
    return run


async def collect(
    config: ProviderConfig,
    operation: str,
    repo: RepoCoordinates,
    trigger: str,
    overrides: dict,
    source: GitHubSource | None = None,
) -> list[CompletionResult] | None:
    """Run one provider operation to completion and return what it delivered.

    Returns ``None`` when the provider refused the repository.
    """
    source = source or GitHubSource(config)
    results: list[CompletionResult] = []
    started = getattr(source, operation)(results.append, repo, trigger, overrides or None, scope=CLI_SCOPE)
    if not started:
        return None
    await source.drain()
    logger.debug("%s delivered %d result(s)", operation, len(results))
    return results


def _error(message: str, exit_code: int) -> NoReturn:
    """Print error to stderr and exit."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=exit_code)

"""Command-line entry point for the glfetch tool."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn, TypeVar

import typer

from glfetch.config import AppSettings, load_settings
from glfetch.fetchers.branches import fetch_branches
from glfetch.fetchers.commits import fetch_commits
from glfetch.fetchers.merge_requests import fetch_merge_requests
from glfetch.gitlab_client import GitLabAPIError, GitLabClient
from glfetch.models import MergeRequestStateFilter
from glfetch.render import console

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

LOGGER = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Read-only GitLab project listings.")

JsonOption = Annotated[bool, typer.Option("--json", help="Print one JSON object per record.")]


@dataclass(frozen=True)
class CliOptions:
    """Global options collected by the callback and shared with sub-commands."""

    config_file: Path | None = None
    project: str | None = None


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    # httpx logs every request at INFO; the client already does so at DEBUG.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable verbose logging output.")] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Read settings from this TOML file instead of ./config.toml."),
    ] = None,
    project: Annotated[
        str | None,
        typer.Option("--project", help="Override the configured project path or ID."),
    ] = None,
) -> None:
    """Configure logging and global options before executing a sub-command."""
    _configure_logging(verbose)
    ctx.obj = CliOptions(config_file=config, project=project)


@app.command("merge-requests")
def merge_requests(
    ctx: typer.Context,
    state: Annotated[
        MergeRequestStateFilter,
        typer.Option("--state", case_sensitive=False, help="Merge request state to list."),
    ] = MergeRequestStateFilter.MERGED,
    as_json: JsonOption = False,
) -> None:
    """List the project's merge requests."""
    settings = _settings(ctx)
    records = _run(
        settings,
        f"the {state.value} merge requests",
        lambda client: fetch_merge_requests(client, settings.project.name, state=state),
    )
    _emit(console.json_lines(records) if as_json else console.merge_request_lines(records))


@app.command()
def branches(ctx: typer.Context, as_json: JsonOption = False) -> None:
    """List the project's repository branches."""
    settings = _settings(ctx)
    records = _run(
        settings,
        "the branches",
        lambda client: fetch_branches(client, settings.project.name),
    )
    _emit(console.json_lines(records) if as_json else console.branch_lines(records))


@app.command()
def commits(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Branch or tag name to list commits for.")],
    as_json: JsonOption = False,
) -> None:
    """List the commits of a branch or tag."""
    settings = _settings(ctx)
    records = _run(
        settings,
        f"the commits of {ref}",
        lambda client: fetch_commits(client, settings.project.name, ref),
    )
    _emit(console.json_lines(records) if as_json else console.commit_lines(records))


@app.command()
def overview(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Branch or tag name to count commits for.")],
) -> None:
    """Fetch open merge requests, branches and commits concurrently and print counts."""
    settings = _settings(ctx)
    project = settings.project.name

    async def _gather(client: GitLabClient) -> tuple[int, int, int]:
        opened, branch_list, commit_list = await asyncio.gather(
            fetch_merge_requests(client, project, state=MergeRequestStateFilter.OPENED),
            fetch_branches(client, project),
            fetch_commits(client, project, ref),
        )
        return len(opened), len(branch_list), len(commit_list)

    opened_count, branch_count, commit_count = _run(settings, "the project overview", _gather)
    typer.echo(f"Project {project}")
    typer.echo(f"    open merge requests = {opened_count}")
    typer.echo(f"    branches            = {branch_count}")
    typer.echo(f"    commits on {ref} = {commit_count}")


def _settings(ctx: typer.Context) -> AppSettings:
    options = ctx.obj if isinstance(ctx.obj, CliOptions) else CliOptions()
    try:
        return load_settings(options.config_file, project=options.project)
    except ValueError as exc:
        _handle_settings_error(exc)


def _run(
    settings: AppSettings,
    description: str,
    operation: Callable[[GitLabClient], Awaitable[ResultT]],
) -> ResultT:
    async def _execute() -> ResultT:
        async with GitLabClient.from_settings(settings) as client:
            return await operation(client)

    try:
        return asyncio.run(_execute())
    except GitLabAPIError as exc:
        LOGGER.debug("Fetching %s failed", description, exc_info=True)
        typer.secho(f"Error: can't get {description} [{exc}]", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _emit(lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(line)


def _handle_settings_error(exc: ValueError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()

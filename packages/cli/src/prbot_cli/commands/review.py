"""review command: run one review session (the container entrypoint)."""

from __future__ import annotations

import click
from rich.console import Console

from prbot_core.engine.claude import build_engine
from prbot_core.models import ReviewOutcome, ReviewRequest
from prbot_core.session import run_review

console = Console()

_ACTION_STYLE = {"reviewed": "green", "skipped": "yellow", "error": "red"}


def _print_outcome(outcome: ReviewOutcome) -> None:
    style = _ACTION_STYLE.get(outcome.action, "white")
    console.print(f"[{style}]{outcome.action.upper()}[/{style}]  {outcome.message}")
    if outcome.findings_count is not None:
        console.print(f"  {outcome.findings_count} finding(s) · verdict: {outcome.verdict}")


@click.command("review")
@click.option("--owner", envvar="PR_OWNER", required=True, help="Repository owner. [env: PR_OWNER]")
@click.option("--repo", envvar="PR_REPO", required=True, help="Repository name. [env: PR_REPO]")
@click.option("--pr", "pr_number", envvar="PR_NUMBER", type=int, required=True, help="Pull request number. [env: PR_NUMBER]")
@click.option(
    "--installation-id",
    envvar="GITHUB_INSTALLATION_ID",
    type=int,
    default=None,
    help="GitHub App installation id. [env: GITHUB_INSTALLATION_ID]",
)
@click.option("--max-files", type=int, default=None, help="Skip PRs changing more files than this.")
@click.option("--no-retry", is_flag=True, help="Do not retry a failed review attempt.")
@click.pass_context
def review_cmd(
    ctx,
    owner: str,
    repo: str,
    pr_number: int,
    installation_id: int | None,
    max_files: int | None,
    no_retry: bool,
):
    """Review a pull request with the analysis engine and post the results.

    Exits with status 1 unless the review completed or was skipped.

    \b
    Credentials (first match wins):
      GITHUB_APP_ID + GITHUB_APP_PRIVATE_KEY   with --installation-id
      GITHUB_TOKEN                             personal or Actions token
      gh auth token                            GitHub CLI session
    """
    from prbot_cli.auth import build_client

    config = dict(ctx.obj["config"])
    if max_files is not None:
        config["max_files_threshold"] = max_files
    if no_retry:
        config["retry_on_error"] = False

    client = build_client(config, installation_id)
    if client is None:
        raise click.UsageError(
            "No GitHub credentials found. Set GITHUB_APP_ID and GITHUB_APP_PRIVATE_KEY with an installation id, "
            "set GITHUB_TOKEN, or run `gh auth login` first."
        )

    console.print(f"Starting review for [bold]{owner}/{repo}#{pr_number}[/bold]")
    outcome = run_review(client, build_engine(config), config, ReviewRequest(owner=owner, repo=repo, pr_number=pr_number))
    _print_outcome(outcome)

    if not outcome.success:
        ctx.exit(1)

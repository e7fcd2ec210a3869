from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .client import GitHubClient
from .collector import collect_report, print_record
from .errors import DailyPrError
from .formatters import build_payload, format_json
from .generator import DEFAULT_MODEL, ReportGenerator, build_prompt, load_inputs
from .models import PullRequestRecord
from .slack import SlackWebhook

_stderr = Console(stderr=True)

DEFAULT_REPORT_PATH = Path("pr-report.json")
DEFAULT_PROMPT_PATH = Path("prompts/daily-pr-report.md")
DEFAULT_NARRATIVE_PATH = Path("daily-report.md")


load_dotenv()


def _require_env(name: str, hint: str | None = None) -> str:
    value = os.environ.get(name)
    if not value:
        _stderr.print(f"[red]Error:[/red] {name} environment variable is not set.")
        if hint:
            _stderr.print(hint)
        sys.exit(1)
    return value


def _fail(exc: DailyPrError) -> NoReturn:
    _stderr.print(f"[red]Error:[/red] {exc}")
    sys.exit(1)


@click.group()
def cli() -> None:
    """dailypr: daily report of your open pull requests."""


@cli.command()
@click.option("--user", envvar="GH_USER", default=None, help="GitHub login to report on. [env: GH_USER]")
@click.option(
    "--repo",
    metavar="OWNER/REPO",
    envvar="GH_REPO",
    default=None,
    help="Only list PRs of this repository. [env: GH_REPO]",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_REPORT_PATH,
    show_default=True,
    help="Where to write the JSON report.",
)
def collect(user: str | None, repo: str | None, output_path: Path) -> None:
    """Collect open pull requests and their last 24h of activity."""
    token = _require_env("GH_PAT")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=_stderr,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Fetching open PRs…", total=None)

            def on_record(index: int, record: PullRequestRecord) -> None:
                print_record(index, record, console=progress.console)
                progress.update(task_id, description=f"Fetched activity for {index} PRs…")

            with GitHubClient(token) as client:
                report = collect_report(client, user=user, repo=repo, on_record=on_record)
    except DailyPrError as exc:
        _fail(exc)

    if report.total_prs == 0:
        _stderr.print("No open pull requests found.")
    else:
        _stderr.print(f"Total: {report.total_prs} open PR(s)")

    output_path.write_text(format_json(report), encoding="utf-8")
    _stderr.print(f"[green]✅ Report saved to: {output_path}[/green]")


@cli.command()
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_REPORT_PATH,
    show_default=True,
    help="JSON report written by `collect`.",
)
@click.option(
    "--prompt",
    "prompt_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_PROMPT_PATH,
    show_default=True,
    help="Prompt template sent before the report.",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_NARRATIVE_PATH,
    show_default=True,
    help="Where to write the generated report.",
)
@click.option("--model", envvar="GEMINI_MODEL", default=DEFAULT_MODEL, show_default=True, help="Gemini model name.")
def generate(report_path: Path, prompt_path: Path, output_path: Path, model: str) -> None:
    """Turn the JSON report into a narrative with Gemini."""
    api_key = _require_env("GOOGLE_API_KEY")

    try:
        template, report_json = load_inputs(report_path, prompt_path)
        _stderr.print("Generating daily PR report with Gemini...")
        text = ReportGenerator(api_key, model).generate(build_prompt(template, report_json))
    except DailyPrError as exc:
        _fail(exc)

    output_path.write_text(text, encoding="utf-8")
    _stderr.print(f"[green]✅ Report saved to: {output_path}[/green]")


@cli.command()
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_NARRATIVE_PATH,
    show_default=True,
    help="Narrative report written by `generate`.",
)
def notify(report_path: Path) -> None:
    """Post the generated report to a Slack webhook."""
    webhook_url = _require_env(
        "SLACK_WEBHOOK_URL",
        hint="Please set up a Slack webhook at https://api.slack.com/messaging/webhooks",
    )

    if not report_path.exists():
        _stderr.print(f"[red]Error:[/red] {report_path} not found. Generate the report first.")
        sys.exit(1)
    content = report_path.read_text(encoding="utf-8")
    if not content.strip():
        _stderr.print(f"[red]Error:[/red] {report_path} is empty.")
        sys.exit(1)

    _stderr.print("Sending report to Slack...")
    payload = build_payload(content, datetime.now())
    try:
        with SlackWebhook(webhook_url) as webhook:
            webhook.post(payload)
    except DailyPrError as exc:
        _fail(exc)

    _stderr.print("[green]✅ Report sent to Slack successfully![/green]")


@cli.command()
def models() -> None:
    """List the Gemini models available to GOOGLE_API_KEY."""
    api_key = _require_env("GOOGLE_API_KEY")

    try:
        for model in ReportGenerator(api_key).list_models():
            methods = ", ".join(getattr(model, "supported_generation_methods", None) or []) or "N/A"
            click.echo(f"Model: {model.name}")
            click.echo(f"  Display Name: {model.display_name}")
            click.echo(f"  Supported Methods: {methods}")
            click.echo(f"  Input Token Limit: {getattr(model, 'input_token_limit', None) or 'N/A'}")
            click.echo(f"  Output Token Limit: {getattr(model, 'output_token_limit', None) or 'N/A'}")
            click.echo()
    except DailyPrError as exc:
        _fail(exc)

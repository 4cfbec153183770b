"""EduTrust CLI — policy checks, application scoring and message gating."""

import json
import sys

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from edutrust import __version__

console = Console()


def _load_document(path: str) -> dict:
    """Read a YAML or JSON mapping from *path*, exiting on parse errors."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"  [red]Failed to parse:[/] {e}")
        sys.exit(1)
    if not isinstance(data, dict):
        console.print(f"  [red]Failed to parse:[/] {path} does not contain a mapping")
        sys.exit(1)
    return data


def _store(data_dir: str | None):
    from edutrust.storage.record_store import RecordStore

    return RecordStore(data_dir)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def main(log_level: str, json_logs: bool):
    """EduTrust — trust & safety and tutor quality evaluation.

    Check text for contact leakage and off-platform solicitation, score
    tutor applications, and gate messages and applications into review.
    """
    from edutrust.utils.logging import setup_logging

    setup_logging(log_level, json_output=json_logs)


# ── Policy ───────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
def check(text: str):
    """Check TEXT against the content policy."""
    from edutrust.policy.engine import check_policy, get_block_message

    result = check_policy(text)

    if not result.blocked:
        console.print("[green]No violations.[/]")
        return

    table = Table(title=f"Violations ({len(result.violations)} found)")
    table.add_column("Type", style="cyan")
    table.add_column("Match")
    table.add_column("Severity", justify="center")
    table.add_column("Message")

    for v in result.violations:
        color = "red" if v.severity.value == "high" else "yellow"
        table.add_row(v.type.value, v.matched_text, f"[{color}]{v.severity.value}[/]", v.message)

    console.print(table)
    console.print(f"\n  Severity:  [bold]{result.severity.value}[/]")
    console.print(f"  Sanitized: {result.sanitized_text}")
    console.print(f"\n[red]BLOCKED[/] {get_block_message(result.violations)}")
    sys.exit(2)


@main.command()
@click.argument("text")
def mask(text: str):
    """Print TEXT with phone numbers, emails and links masked."""
    from edutrust.policy.engine import mask_sensitive_content

    click.echo(mask_sensitive_content(text))


# ── Applications ─────────────────────────────────────────────────────


def _print_analysis(result, status) -> None:
    console.print(
        Panel(
            f"Quality score: [bold]{result.quality_score}[/]/100\n"
            f"Gate status:   [bold]{status.value}[/]\n\n"
            f"{result.auto_summary}",
            title="Application Evaluation",
        )
    )

    table = Table(title="Dimensions")
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right", style="green")
    for name, value in result.dimension_scores.to_dict().items():
        table.add_row(name, f"{value}%")
    console.print(table)

    if result.risk_flags:
        console.print("\n[yellow]Risk flags:[/]")
        for flag in result.risk_flags:
            console.print(f"  [yellow]![/] {flag.value}")

    if result.improvement_checklist:
        console.print("\n[bold]Improvement checklist:[/]")
        for item in result.improvement_checklist:
            console.print(f"  - {item}")


@main.command()
@click.argument("application_path")
@click.option("--settings", "settings_path", default=None, help="Settings YAML file")
@click.option("--as-json", is_flag=True, help="Print the raw evaluation as JSON")
def evaluate(application_path: str, settings_path: str | None, as_json: bool):
    """Score a tutor application without recording it.

    APPLICATION_PATH is a YAML or JSON file with ``profile`` and
    ``skill_check`` sections.
    """
    from edutrust.applications.gate import initial_status
    from edutrust.config import load_settings
    from edutrust.scoring.scorer import evaluate_tutor_application

    settings = load_settings(settings_path)
    result = evaluate_tutor_application(_load_document(application_path))
    status = initial_status(result, settings.gate.min_score_for_auto_submit)

    if as_json:
        data = result.to_dict()
        data["status"] = status.value
        click.echo(json.dumps(data, indent=2))
        return

    _print_analysis(result, status)


@main.command()
@click.argument("application_path")
@click.option("--user", "user_id", default="", help="Applicant user ID")
@click.option("--data-dir", "-d", default=None, help="Record store directory")
@click.option("--settings", "settings_path", default=None, help="Settings YAML file")
def apply(application_path: str, user_id: str, data_dir: str | None, settings_path: str | None):
    """Submit a tutor application through the application gate."""
    from edutrust.applications.gate import ApplicationGate
    from edutrust.config import load_settings

    settings = load_settings(settings_path)
    gate = ApplicationGate(_store(data_dir), settings.gate)
    record = gate.submit(_load_document(application_path), user_id=user_id)

    color = "green" if record["status"] == "submitted" else "yellow"
    console.print(
        f"  Application [cyan]{record['id']}[/] -> [{color}]{record['status']}[/] "
        f"(score {record['quality_score']})"
    )


@main.command()
@click.argument("application_id")
@click.option("--status", required=True, type=click.Choice(["approved", "rejected"]))
@click.option("--notes", default="", help="Admin notes")
@click.option("--reviewer", default="", help="Reviewer user ID")
@click.option("--data-dir", "-d", default=None, help="Record store directory")
def review(application_id: str, status: str, notes: str, reviewer: str, data_dir: str | None):
    """Approve or reject an application."""
    from edutrust.applications.gate import ApplicationGate

    gate = ApplicationGate(_store(data_dir))
    record = gate.review(application_id, status, admin_notes=notes, reviewer_id=reviewer)
    if record is None:
        console.print(f"[red]Application not found:[/] {application_id}")
        sys.exit(1)
    console.print(f"  Application [cyan]{application_id}[/] -> {record['status']}")


@main.command()
@click.option("--data-dir", "-d", default=None, help="Record store directory")
def holds(data_dir: str | None):
    """List applications held for manual review."""
    from edutrust.applications.gate import ApplicationGate

    held = ApplicationGate(_store(data_dir)).hold_queue()
    if not held:
        console.print("[yellow]Hold queue is empty.[/]")
        return

    table = Table(title=f"Held applications ({len(held)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Flags")
    for r in held:
        table.add_row(
            r["id"],
            r.get("profile", {}).get("name", ""),
            str(r.get("quality_score", 0)),
            ", ".join(r.get("risk_flags", [])),
        )
    console.print(table)


# ── Messaging ────────────────────────────────────────────────────────


@main.command()
@click.argument("body")
@click.option("--from", "from_user", required=True, help="Sender user ID")
@click.option("--to", "to_user", required=True, help="Recipient user ID")
@click.option("--student", required=True, help="Student ID the thread belongs to")
@click.option("--thread", required=True, help="Thread ID")
@click.option("--data-dir", "-d", default=None, help="Record store directory")
@click.option("--settings", "settings_path", default=None, help="Settings YAML file")
def send(
    body: str,
    from_user: str,
    to_user: str,
    student: str,
    thread: str,
    data_dir: str | None,
    settings_path: str | None,
):
    """Send BODY through the messaging gate."""
    from edutrust.config import load_settings
    from edutrust.messaging.gate import MessagingGate
    from edutrust.messaging.models import BlockedResult, MessageDraft

    settings = load_settings(settings_path)
    gate = MessagingGate(_store(data_dir))
    draft = MessageDraft(
        thread_id=thread,
        student_id=student,
        from_user_id=from_user,
        to_user_id=to_user,
        body=body,
    )
    result = gate.create_message(draft, settings.communication)

    if isinstance(result, BlockedResult):
        console.print(f"[red]BLOCKED[/] {result.reason}")
        sys.exit(2)
    console.print(f"  [green]Sent[/] {result.id}")


@main.command()
@click.option("--data-dir", "-d", default=None, help="Record store directory")
def incidents(data_dir: str | None):
    """List policy incidents."""
    from edutrust.messaging.gate import MessagingGate

    records = MessagingGate(_store(data_dir)).list_incidents()
    if not records:
        console.print("[yellow]No incidents recorded.[/]")
        return

    table = Table(title=f"Incidents ({len(records)})")
    table.add_column("When", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Severity", justify="center")
    table.add_column("Actor")
    table.add_column("Snippet")
    for r in records:
        table.add_row(
            r.get("created_at", "")[:19],
            r.get("type", ""),
            r.get("severity", ""),
            r.get("actor_user_id", ""),
            r.get("message_snippet", "")[:50],
        )
    console.print(table)


if __name__ == "__main__":
    main()

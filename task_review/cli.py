from typing import Optional
import typer
import asyncio
import logging
from typing_extensions import Annotated
from rich.console import Console
from rich.table import Table

from task_review.client.task_review import TaskReview
from task_review.domains.errors import ReviewError

logging.basicConfig(level=logging.WARNING, format="%(levelname)s:%(name)s:%(message)s")

app = typer.Typer(help="Task completion review cycle.")
console = Console()

ConfigOption = Annotated[
    str, typer.Option(help="Path to the configuration JSON or Python file.")
]


def _load(config: str) -> TaskReview:
    try:
        return TaskReview(config_path=config)
    except FileNotFoundError:
        console.print(
            f"[bold red]Error:[/bold red] Configuration file not found at '{config}'"
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        console.print(f"[bold red]Error loading configuration:[/bold red] {e}")
        raise typer.Exit(code=1)


def _fail(error: ReviewError) -> None:
    console.print(f"[bold red]{error.code}:[/bold red] {error.message}")
    for key, value in error.to_dict().items():
        if key not in ("error", "message") and value is not None:
            console.print(f"  [dim]{key}:[/dim] {value}")
    raise typer.Exit(code=1)


def _fmt(value) -> str:
    if value is None:
        return "-"
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d %H:%M")
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


@app.command()
def pending(
    reviewer: Annotated[
        Optional[str], typer.Option(help="Only show this reviewer's projects.")
    ] = None,
    config: ConfigOption = "config.json",
):
    """List assignments awaiting review."""
    client = _load(config)
    try:
        summaries = client.list_pending_reviews(reviewer)
    except ReviewError as e:
        _fail(e)

    table = Table(title=f"Pending reviews ({len(summaries)})")
    for column in ("Proof", "Task", "Project", "Employee", "Submitted", "Defects"):
        table.add_column(column)
    for summary in summaries:
        table.add_row(
            _fmt(summary.proof_id),
            summary.title,
            _fmt(summary.project_name or summary.project_id),
            _fmt(summary.employee_name or summary.employee_id),
            _fmt(summary.submitted_at),
            str(summary.defect_count),
        )
    console.print(table)


@app.command()
def status(
    proof_id: Annotated[str, typer.Argument(help="Proof submission ID.")],
    config: ConfigOption = "config.json",
):
    """Show the current status of a proof."""
    client = _load(config)
    try:
        snapshot = client.get_proof_status(proof_id)
    except ReviewError as e:
        _fail(e)

    console.print(f"[bold]Proof[/bold] {snapshot.proof_id} on task {snapshot.task_id}")
    console.print(f"  assignment: {_fmt(snapshot.assignment_status)}")
    console.print(f"  decision:   {_fmt(snapshot.review_decision)}")
    console.print(
        f"  rework:     {snapshot.rework_attempts}/{snapshot.max_rework_attempts}"
        f" (defects: {snapshot.defect_count})"
    )
    if snapshot.reassignment_required:
        console.print("  [yellow]needs manual reassignment[/yellow]")
    for review in snapshot.history:
        console.print(
            f"  [dim]{_fmt(review.reviewed_at)}[/dim] {_fmt(review.decision)}: {review.comments}"
        )


@app.command()
def submit(
    task_id: Annotated[str, typer.Argument(help="Task ID.")],
    employee_id: Annotated[str, typer.Argument(help="Submitting employee ID.")],
    github: Annotated[str, typer.Option(help="Repository link.")],
    video: Annotated[str, typer.Option(help="Demo video link.")],
    notes: Annotated[str, typer.Option(help="Completion notes.")],
    config: ConfigOption = "config.json",
):
    """Submit proof of work for a task."""
    client = _load(config)
    try:
        result = asyncio.run(client.submit_proof(task_id, employee_id, github, video, notes))
    except ReviewError as e:
        _fail(e)
    console.print(f"[green]Submitted[/green] proof {result.proof_id} ({_fmt(result.status)})")


@app.command()
def resubmit(
    proof_id: Annotated[str, typer.Argument(help="Proof submission ID.")],
    employee_id: Annotated[str, typer.Argument(help="Owning employee ID.")],
    github: Annotated[str, typer.Option(help="Repository link.")],
    video: Annotated[str, typer.Option(help="Demo video link.")],
    notes: Annotated[str, typer.Option(help="Completion notes.")],
    config: ConfigOption = "config.json",
):
    """Resubmit a proof after rework."""
    client = _load(config)
    try:
        result = asyncio.run(client.resubmit_proof(proof_id, employee_id, github, video, notes))
    except ReviewError as e:
        _fail(e)
    console.print(
        f"[green]Resubmitted[/green] proof {result.proof_id} "
        f"(rework attempt {result.rework_attempts})"
    )


@app.command()
def review(
    proof_id: Annotated[str, typer.Argument(help="Proof submission ID.")],
    reviewer_id: Annotated[str, typer.Argument(help="Reviewer ID.")],
    decision: Annotated[str, typer.Option(help="approved or defect_found.")],
    comments: Annotated[str, typer.Option(help="Review comments.")],
    defect: Annotated[
        Optional[str], typer.Option(help="Defect description (defect_found only).")
    ] = None,
    severity: Annotated[
        Optional[str], typer.Option(help="low, medium, high or critical.")
    ] = None,
    config: ConfigOption = "config.json",
):
    """Approve a proof or report a defect."""
    client = _load(config)
    try:
        result = asyncio.run(
            client.review_proof(proof_id, reviewer_id, decision, comments, defect, severity)
        )
    except ReviewError as e:
        _fail(e)

    console.print(f"[green]Recorded[/green] review {result.review_id}: {_fmt(result.new_status)}")
    if result.next_task:
        if result.next_task.task_id:
            console.print(
                f"  next task: {result.next_task.title} due {_fmt(result.next_task.deadline)}"
            )
        else:
            console.print("  all tasks completed")


@app.command()
def analytics(
    days: Annotated[int, typer.Option(help="Window size in days.")] = 30,
    reviewer: Annotated[
        Optional[str], typer.Option(help="Only count this reviewer's projects.")
    ] = None,
    config: ConfigOption = "config.json",
):
    """Show review cycle metrics."""
    client = _load(config)
    try:
        metrics = client.get_review_analytics(days, reviewer)
    except ReviewError as e:
        _fail(e)

    table = Table(title=metrics.period)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Submissions", str(metrics.total_submissions))
    table.add_row("Approved", str(metrics.approved))
    table.add_row("Defects", str(metrics.defects))
    table.add_row("Pending", str(metrics.pending))
    table.add_row("Approval rate", f"{metrics.approval_rate}%")
    table.add_row("Defect rate", f"{metrics.defect_rate}%")
    table.add_row("Avg rework attempts", f"{metrics.avg_rework_attempts:.2f}")
    console.print(table)


if __name__ == "__main__":
    app()

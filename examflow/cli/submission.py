"""CLI commands for inspecting submissions and the evaluation queue."""

from __future__ import annotations

from sqlalchemy.orm import Session

import examflow.lib.cli as click
import examflow.lib.json as json
from examflow.core import di
from examflow.grading import queue, SubmissionNotFound
from examflow.model import ExamID, ExamType, SubmissionID
from examflow.storage import submission as submission_storage


@click.group("submission")
def submission():
    """Inspect submissions."""
    ...


@submission.command("pending")
@click.option("--type", "-t", "submission_type", type=click.EnumType(ExamType), default=None)
@click.option("--exam", "-e", "exam_id", type=click.KeyParamType(ExamID), default=None)
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None)
@di.inject
def submission_pending(
    submission_type: ExamType | None,
    exam_id: ExamID | None,
    limit: int | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """List submissions awaiting evaluation, oldest first."""
    with session.begin():
        summaries = queue.pending(submission_type=submission_type, exam_id=exam_id, limit=limit, session=session)

    if not summaries:
        click.echo("Nothing to evaluate.")
        return
    for s in summaries:
        click.echo(
            f"{s.submitted_at:%Y-%m-%d %H:%M:%S}  {s.submission_id}  {s.submission_type.value:<11}  "
            f"{s.exam_id}  {s.learner_id}"
        )


@submission.command("show")
@click.argument("submission_id", type=click.KeyParamType(SubmissionID))
@di.inject
def submission_show(submission_id: SubmissionID, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Print a submission as JSON."""
    with session.begin():
        found = submission_storage.get(submission_id, session=session)
    if found is None:
        raise SubmissionNotFound(f"submission {submission_id} does not exist")
    click.echo(json.dumps(found.model_dump(mode="json"), indent=2))


@submission.command("stats")
@click.option("--exam", "-e", "exam_id", type=click.KeyParamType(ExamID), default=None)
@di.inject
def submission_stats(exam_id: ExamID | None, session: Session = di.Provide["storage.persistent.session"]) -> None:
    with session.begin():
        stats = submission_storage.stats(exam_id=exam_id, session=session)

    click.echo(f"Total: {stats.total}")
    click.echo(f"  Pending: {stats.pending}")
    click.echo(f"  Evaluated: {stats.evaluated}")
    if stats.average_score is not None:
        click.echo(f"  Average score: {stats.average_score}")

"""CLI commands for managing exam definitions."""

from __future__ import annotations

import decimal
import typing as t
from pathlib import Path

import yaml
from sqlalchemy.orm import Session

import examflow.lib.cli as click
from examflow.core import di
from examflow.grading import catalog
from examflow.model import Exam, ExamID, ExamType


@click.group("exam")
def exam():
    """Manage exam definitions."""
    ...


@exam.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@di.inject
def exam_import(path: Path, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """Create an exam from a YAML definition.

    PATH holds a mapping with `title`, `exam_type`, `questions` and optionally
    `description` and `total_max_marks`.
    """
    with path.open() as f:
        definition = yaml.safe_load(f)
    if not isinstance(definition, dict):
        raise click.UsageError(f"{path}: expected a mapping at the top level")
    definition = t.cast(dict[str, t.Any], definition)

    try:
        exam_type = ExamType(definition["exam_type"])
        title = definition["title"]
    except KeyError as e:
        raise click.UsageError(f"{path}: missing {e.args[0]}") from e
    except ValueError as e:
        raise click.UsageError(f"{path}: {e}") from e

    total = definition.get("total_max_marks")
    with session.begin():
        created = catalog.create_exam(
            title,
            exam_type,
            definition.get("questions") or [],
            total_max_marks=decimal.Decimal(str(total)) if total is not None else None,
            description=definition.get("description"),
            session=session,
        )

    click.echo(f"Created exam: {created.title}")
    click.echo(f"  ID: {created.exam_id}")
    click.echo(f"  Type: {created.exam_type.value}")
    click.echo(f"  Questions: {len(created.questions)}")
    click.echo(f"  Max marks: {created.total_max_marks}")


@exam.command("list")
@click.option("--type", "-t", "exam_type", type=click.EnumType(ExamType), default=None)
@di.inject
def exam_list(exam_type: ExamType | None, session: Session = di.Provide["storage.persistent.session"]) -> None:
    """List exams, optionally of one type."""
    with session.begin():
        exams = catalog.find_exams(exam_type, session=session)

    if not exams:
        click.echo("No exams found.")
        return
    for e in exams:
        click.echo(f"{e.exam_id}  {e.exam_type.value:<11}  {e.total_max_marks:>8}  {e.title}")


@exam.command("show")
@click.argument("exam_id", type=click.KeyParamType(ExamID))
@di.inject
def exam_show(exam_id: ExamID, session: Session = di.Provide["storage.persistent.session"]) -> None:
    with session.begin():
        found = catalog.get_exam(exam_id, session=session)
    _echo_exam(found)


@exam.command("set-max-marks")
@click.argument("exam_id", type=click.KeyParamType(ExamID))
@click.argument("total", type=decimal.Decimal)
@click.option(
    "--question",
    "-q",
    "question_points",
    multiple=True,
    help="per-question max points as INDEX=POINTS, e.g. -q 0=40",
)
@di.inject
def exam_set_max_marks(
    exam_id: ExamID,
    total: decimal.Decimal,
    question_points: tuple[str, ...],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Change an exam's maximum marks.

    For mcq and descriptive exams TOTAL must equal the sum of the question
    points after any --question changes.
    """
    points: dict[int, decimal.Decimal] = {}
    for qp in question_points:
        index, sep, value = qp.partition("=")
        try:
            if not sep:
                raise ValueError(qp)
            points[int(index)] = decimal.Decimal(value)
        except (ValueError, decimal.InvalidOperation) as e:
            raise click.BadParameter(f"expected INDEX=POINTS, got {qp!r}", param_hint="--question") from e

    with session.begin():
        updated = catalog.update_max_marks(exam_id, total, points, session=session)
    _echo_exam(updated)


def _echo_exam(e: Exam) -> None:
    click.echo(f"Exam: {e.title}")
    click.echo(f"  ID: {e.exam_id}")
    click.echo(f"  Type: {e.exam_type.value}")
    click.echo(f"  Max marks: {e.total_max_marks}")
    if e.description:
        click.echo(f"  Description: {e.description}")
    click.echo(f"\nQuestions ({len(e.questions)}):")
    for i, q in enumerate(e.questions):
        click.echo(f"  [{i}] ({q.max_points}) {q.prompt}")

import json
import logging
import random
from pathlib import Path
from typing import Optional

import typer

from qtype_ordering.core.attempt import QuestionAttempt
from qtype_ordering.core.config import Preferences, load_config
from qtype_ordering.core.strings import get_string, set_language
from qtype_ordering.forms.edit_form import OrderingEditForm
from qtype_ordering.moodle_questions import MoodleQuiz
from qtype_ordering.output.renderer import OrderingRenderer
from qtype_ordering.privacy.provider import Provider
from qtype_ordering.services.batch_grading import (
    load_questions,
    read_questions,
    run_batch_grading,
    split_response,
)

app = typer.Typer(add_completion=False, no_args_is_help=True)

_state = {"config": {}}


def _read_json(p: Path):
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(p: Path, obj):
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)


def _fail(msg: str):
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", help="JSON config file"),
    lang: Optional[str] = typer.Option(None, "--lang", help="en | vi"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    cfg = load_config(str(config) if config else None)
    _state["config"] = cfg
    level = logging.DEBUG if verbose else getattr(logging, str(cfg["log_level"]).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    set_language(lang or cfg["lang"])


@app.command()
def build(json_file: Path, xml_out: Path = Path("output_questions/moodle.xml")):
    """Questions JSON -> Moodle XML."""
    try:
        questions = read_questions(str(json_file))
    except (OSError, ValueError) as e:
        _fail(str(e))
    quiz = MoodleQuiz()
    for q in questions:
        quiz.add_question(q)
    xml_out.parent.mkdir(parents=True, exist_ok=True)
    quiz.export(xml_out)
    typer.echo(f"XML: {xml_out} ({len(questions)} question(s))")


@app.command("import-xml")
def import_xml(xml_file: Path, json_out: Path = Path("output_questions/questions.json")):
    """Moodle XML -> questions JSON (only ordering questions)."""
    try:
        quiz = MoodleQuiz.load(xml_file)
    except (OSError, ValueError) as e:
        _fail(str(e))
    _write_json(json_out, [q.to_dict() for q in quiz.questions])
    typer.echo(f"JSON: {json_out} ({len(quiz.questions)} question(s))")


@app.command()
def validate(form_json: Path, save_to: Optional[Path] = typer.Option(None, "--save-to")):
    """Validate edit-form data; optionally save the resulting question as JSON."""
    data = _read_json(form_json)
    form = OrderingEditForm(preferences=Preferences(_state["config"].get("preferences_file")),
                            defaultanswerformat=int(_state["config"].get("defaultanswerformat", 0)))
    errors = form.validation(data)
    if errors:
        for field, msg in errors.items():
            typer.echo(f"{field}: {msg}", err=True)
        raise typer.Exit(code=1)
    typer.echo("OK")
    if save_to:
        question = form.save_question(data)
        _write_json(save_to, [question.to_dict()])
        typer.echo(f"JSON: {save_to}")


@app.command()
def grade(
    json_file: Path,
    question: str = typer.Option(..., "--question", "-q", help="Question name or id"),
    response: str = typer.Option(..., "--response", "-r", help="Items in order, separated by '|'"),
    html: bool = typer.Option(False, "--html", help="Print rendered feedback HTML"),
):
    """Grade one response against the full correct order."""
    try:
        questions = load_questions(str(json_file))
    except (OSError, ValueError) as e:
        _fail(str(e))
    q = questions.get(question)
    if q is None:
        _fail(f"Unknown question {question!r}")
    seed = _state["config"].get("random_seed")
    if seed is not None:
        q.rng = random.Random(seed)

    qa = QuestionAttempt(q)
    step = qa.start()
    allids = ",".join(str(a) for a in q.answers)
    step.set_qt_var("_correctresponse", allids)
    q.apply_attempt_state(step)
    texts = split_response(response)
    if not texts:
        _fail("Empty response")
    try:
        resp = q.response_for_texts(texts)
    except ValueError as e:
        _fail(str(e))
    graded = qa.finish(resp)
    numright, numpartial, numwrong = q.get_num_parts_right(resp)

    typer.echo(f"{get_string('gradingtype')}: {q.get_grading_types(q.gradingtype)}")
    typer.echo(f"Fraction: {graded.get_fraction():.4f}  State: {graded.get_state()}")
    typer.echo(f"{numright} / {numpartial} / {numwrong} (right / partial / wrong)")
    if html:
        out = OrderingRenderer().render(qa)
        for part in ("formulation", "specificfeedback", "rightanswer"):
            if out[part]:
                typer.echo(out[part])


@app.command("grade-batch")
def grade_batch(json_file: Path, responses: Path, report_out: Path = Path("output_questions/report.csv")):
    """Grade a CSV/Excel table of responses into a report."""
    try:
        report = run_batch_grading(str(json_file), str(responses), str(report_out))
    except (OSError, ValueError) as e:
        _fail(str(e))
    errors = int((report["error"] != "").sum())
    typer.echo(f"Report: {report_out} ({len(report)} row(s), {errors} error(s))")


@app.command()
def privacy():
    """Print the privacy declaration."""
    typer.echo(Provider.get_reason_text())


if __name__ == "__main__":
    app()

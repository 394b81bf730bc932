"""CLI entry point for Quizent."""

import asyncio
import json
import logging
import random
import sys
from pathlib import Path

import click


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Quizent — adaptive programming quizzes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    from quizent.config.settings import Settings

    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = Settings.load()


def _bank(ctx: click.Context):
    from quizent.bank.registry import CatalogQuestionBank

    if "bank" not in ctx.obj:
        ctx.obj["bank"] = CatalogQuestionBank(ctx.obj["settings"].catalog_dir)
    return ctx.obj["bank"]


@main.command()
@click.option("--language", default=None, help="Only list quizzes in this language")
@click.pass_context
def quizzes(ctx: click.Context, language) -> None:
    """List available quizzes."""
    bank = _bank(ctx)
    if language is not None and language not in bank.get_languages():
        known = ", ".join(bank.get_languages()) or "none"
        raise click.BadParameter(
            f"No quizzes in {language} (available: {known})", param_hint="--language"
        )
    for quiz in bank.get_quizzes(language):
        click.echo(f"  {quiz.id}: {quiz.title} [{quiz.language}] ({quiz.question_count} questions)")


@main.command()
@click.argument("quiz_id")
@click.option("--max-questions", type=int, default=None, help="Questions per session")
@click.option("--seed", type=int, default=None, help="Seed for question selection")
@click.pass_context
def play(ctx: click.Context, quiz_id: str, max_questions, seed) -> None:
    """Take an adaptive quiz in the terminal."""
    from quizent.engine.insights import attempt_insight
    from quizent.engine.session import QuizSession

    settings = ctx.obj["settings"]
    bank = _bank(ctx)
    quiz = bank.get_quiz(quiz_id)
    if quiz is None:
        raise click.BadParameter(f"Unknown quiz: {quiz_id}", param_hint="QUIZ_ID")

    session = QuizSession(
        quiz=quiz,
        questions=bank.get_questions(quiz_id),
        max_questions=max_questions or settings.quiz.max_questions,
        starting_difficulty=settings.quiz.starting_difficulty,
        rng=random.Random(seed) if seed is not None else None,
    )
    click.echo(f"{quiz.title}\n")

    question = session.start()
    while question is not None:
        click.echo(
            f"Q{session.state.question_number} [{question.difficulty.label}] {question.text}"
        )
        for i, option in enumerate(question.options, start=1):
            click.echo(f"  {i}. {option}")
        choice = click.prompt(
            "Your answer", type=click.IntRange(1, len(question.options))
        )
        answer = session.submit(choice - 1)
        if answer.is_correct:
            click.echo("Correct!")
        else:
            correct = question.options[question.correct_answer_index]
            click.echo(f"Not quite. The correct answer is: {correct}")
        if question.explanation:
            click.echo(question.explanation)
        click.echo()
        question = session.advance()

    result = session.results()
    click.echo(
        f"Score: {result.score}/{len(result.answers)} ({result.accuracy:.0f}%) "
        f"- {result.competency.value}"
    )
    for difficulty, stats in result.difficulty_breakdown.items():
        click.echo(f"  {difficulty.label}: {stats.correct}/{stats.total}")
    click.echo(
        "Difficulty path: " + " -> ".join(d.value for d in session.state.trajectory)
    )
    insight = attempt_insight(result.accuracy, quiz.topic_name)
    click.echo(f"\n{insight['strength']}\n{insight['weakness']}\n{insight['recommendation']}")


@main.command()
@click.argument("attempts_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_context
def insights(ctx: click.Context, attempts_file: Path, today) -> None:
    """Summarize attempt history and suggest what to study next."""
    from quizent.engine.performance import Attempt, calc_streak, topic_performances
    from quizent.engine.recommendations import RecommendationService

    with open(attempts_file) as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{attempts_file} is not valid JSON: {e}")
    try:
        attempts = [Attempt.from_dict(a) for a in raw]
    except (KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid attempt record: {e}")

    performances = topic_performances(attempts)
    for p in performances:
        click.echo(
            f"  {p.topic_name} ({p.language}): {p.accuracy:.0f}% "
            f"- {p.competency.value} ({p.attempts_count} attempts)"
        )
    streak = calc_streak(
        [a.completed_at for a in attempts], today=today.date() if today else None
    )
    click.echo(f"Streak: {streak} day{'s' if streak != 1 else ''}\n")

    async def _recommend():
        service = RecommendationService(settings=ctx.obj["settings"])
        try:
            return await service.recommend(performances)
        finally:
            await service.aclose()

    rec = asyncio.run(_recommend())
    click.echo(rec.summary)
    click.echo("\nStrengths:")
    for item in rec.strengths:
        click.echo(f"  - {item}")
    click.echo("Weaknesses:")
    for item in rec.weaknesses:
        click.echo(f"  - {item}")
    click.echo("Recommendations:")
    for item in rec.recommendations:
        click.echo(f"  - {item}")
    click.echo(f"\nStudy plan: {rec.study_plan}")

"""Quiz session driver: select → answer → adapt → select."""

from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from quizent.bank.catalog import Question, Quiz
from quizent.engine.adaptive import Difficulty, next_difficulty, select_next
from quizent.engine.performance import Answer, Attempt, QuizResult, calculate_results


@dataclass
class SessionState:
    quiz: Quiz
    current_difficulty: Difficulty
    answered_ids: set[str] = field(default_factory=set)
    answers: list[Answer] = field(default_factory=list)
    question_number: int = 1
    current_question: Optional[Question] = None
    trajectory: list[Difficulty] = field(default_factory=list)
    finished: bool = False

    @property
    def awaiting_answer(self) -> bool:
        return self.current_question is not None and self.current_question.id not in self.answered_ids


class QuizSession:
    """Runs one adaptive quiz over a fixed question pool.

    The session ends when ``max_questions`` answers have been given or when
    the selector reports that no unanswered question is left.
    """

    def __init__(
        self,
        quiz: Quiz,
        questions: list[Question],
        max_questions: int = 9,
        starting_difficulty: Difficulty = Difficulty.MEDIUM,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_questions < 1:
            raise ValueError(f"max_questions must be at least 1, got {max_questions}")
        self.questions = list(questions)
        self.max_questions = max_questions
        self.rng = rng
        self._clock = clock
        self._shown_at = 0.0
        self.started_at = datetime.now(timezone.utc)
        self.state = SessionState(
            quiz=quiz,
            current_difficulty=Difficulty(starting_difficulty),
            trajectory=[Difficulty(starting_difficulty)],
        )

    @property
    def is_finished(self) -> bool:
        return self.state.finished

    @property
    def current_question(self) -> Optional[Question]:
        return self.state.current_question

    def start(self) -> Optional[Question]:
        """Select the first question at the starting difficulty."""
        if self.state.current_question is not None or self.state.answers:
            raise ValueError("Session already started")
        return self._present(self.state.current_difficulty)

    def submit(self, selected_index: int, time_spent: Optional[int] = None) -> Answer:
        """Record the answer to the current question and adapt difficulty."""
        question = self.state.current_question
        if question is None or self.state.finished:
            raise ValueError("No question is awaiting an answer")
        if question.id in self.state.answered_ids:
            raise ValueError(f"Question {question.id} already answered")
        if not 0 <= selected_index < len(question.options):
            raise ValueError(f"Selected option {selected_index} out of range")

        if time_spent is None:
            time_spent = int(self._clock() - self._shown_at)
        answer = Answer(
            id=f"ans_{len(self.state.answers)}",
            question_id=question.id,
            selected_option_index=selected_index,
            is_correct=question.is_correct(selected_index),
            difficulty=question.difficulty,
            time_spent=max(1, time_spent),
            timestamp=datetime.now(timezone.utc),
        )
        self.state.answers.append(answer)
        self.state.answered_ids.add(question.id)

        self.state.current_difficulty = next_difficulty(
            self.state.current_difficulty, answer.is_correct
        )
        self.state.trajectory.append(self.state.current_difficulty)
        return answer

    def advance(self) -> Optional[Question]:
        """Move to the next question, or finish and return None."""
        if self.state.finished:
            return None
        if self.state.current_question is None:
            raise ValueError("Session not started")
        if self.state.awaiting_answer:
            raise ValueError("Current question has not been answered")

        if self.state.question_number >= self.max_questions:
            self.state.finished = True
            self.state.current_question = None
            return None

        question = self._present(self.state.current_difficulty)
        if question is not None:
            self.state.question_number += 1
        return question

    def _present(self, difficulty: Difficulty) -> Optional[Question]:
        question = select_next(self.questions, difficulty, self.state.answered_ids, self.rng)
        self.state.current_question = question
        if question is None:
            self.state.finished = True
        else:
            self._shown_at = self._clock()
        return question

    def results(self) -> QuizResult:
        return calculate_results(self.state.answers)

    def to_attempt(self) -> Attempt:
        """Summarize the session as an Attempt record for history."""
        result = self.results()
        now = datetime.now(timezone.utc)
        return Attempt(
            id=f"att-{uuid.uuid4()}",
            quiz_id=self.state.quiz.id,
            quiz_title=self.state.quiz.title,
            topic_name=self.state.quiz.topic_name,
            language=self.state.quiz.language,
            score=result.score,
            total_questions=len(result.answers),
            accuracy=result.accuracy,
            time_taken=int((now - self.started_at).total_seconds()),
            completed_at=now,
            difficulty_breakdown=result.difficulty_breakdown,
        )

"""Server handler: dispatches JSON-lines requests to the quiz engine."""

from __future__ import annotations

import random
from typing import Optional

from quizent.bank.registry import CatalogQuestionBank, QuestionBank
from quizent.config.settings import Settings
from quizent.engine.insights import attempt_insight
from quizent.engine.performance import Attempt, calc_streak, topic_performances
from quizent.engine.recommendations import RecommendationService
from quizent.engine.session import QuizSession

from .protocol import (
    HistoryParams,
    ListQuizzesParams,
    Params,
    Request,
    StartQuizParams,
    SubmitAnswerParams,
)


def _question_payload(session: QuizSession) -> dict:
    question = session.current_question
    state = session.state
    return {
        "finished": session.is_finished,
        "question": question.to_dict(include_answer=False) if question else None,
        "questionNumber": state.question_number,
        "maxQuestions": session.max_questions,
        "difficulty": state.current_difficulty.value,
    }


class ServerHandler:
    """Routes incoming requests to engine methods and returns result dicts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        bank: Optional[QuestionBank] = None,
        recommender: Optional[RecommendationService] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or Settings.load()
        self.bank = bank or CatalogQuestionBank(self.settings.catalog_dir)
        self.recommender = recommender or RecommendationService(settings=self.settings)
        self.rng = rng

        self._session: Optional[QuizSession] = None
        self._attempts: list[Attempt] = []

    async def dispatch(self, msg: dict) -> dict:
        """Validate a request message and route it to its handler method."""
        request = Request.parse(msg)
        handler_map = {
            "listQuizzes": self._list_quizzes,
            "startQuiz": self._start_quiz,
            "getQuestion": self._get_question,
            "submitAnswer": self._submit_answer,
            "nextQuestion": self._next_question,
            "getResults": self._get_results,
            "getPerformance": self._get_performance,
            "getRecommendations": self._get_recommendations,
        }
        return await handler_map[request.method](request.params)

    def _require_session(self) -> QuizSession:
        if self._session is None:
            raise ValueError("No quiz started")
        return self._session

    def _history(self, params: HistoryParams) -> list[Attempt]:
        if params.attempts is not None:
            return [Attempt.from_dict(a) for a in params.attempts]
        return list(self._attempts)

    async def _list_quizzes(self, params: ListQuizzesParams) -> dict:
        return {
            "quizzes": [q.to_dict() for q in self.bank.get_quizzes(params.language)],
            "languages": self.bank.get_languages(),
        }

    async def _start_quiz(self, params: StartQuizParams) -> dict:
        quiz = self.bank.get_quiz(params.quiz_id)
        if quiz is None:
            raise ValueError(f"Unknown quiz: {params.quiz_id}")

        self._session = QuizSession(
            quiz=quiz,
            questions=self.bank.get_questions(quiz.id),
            max_questions=params.max_questions or self.settings.quiz.max_questions,
            starting_difficulty=self.settings.quiz.starting_difficulty,
            rng=self.rng,
        )
        self._session.start()
        return {"quiz": quiz.to_dict(), **_question_payload(self._session)}

    async def _get_question(self, params: Params) -> dict:
        return _question_payload(self._require_session())

    async def _submit_answer(self, params: SubmitAnswerParams) -> dict:
        session = self._require_session()
        question = session.current_question
        answer = session.submit(params.selected_option, time_spent=params.time_spent)
        return {
            "answer": answer.to_dict(),
            "correctAnswerIndex": question.correct_answer_index,
            "explanation": question.explanation,
            "nextDifficulty": session.state.current_difficulty.value,
        }

    async def _next_question(self, params: Params) -> dict:
        session = self._require_session()
        was_finished = session.is_finished
        session.advance()
        if session.is_finished and not was_finished:
            self._attempts.append(session.to_attempt())
        return _question_payload(session)

    async def _get_results(self, params: Params) -> dict:
        session = self._require_session()
        result = session.results()
        return {
            **result.to_dict(),
            "finished": session.is_finished,
            "trajectory": [d.value for d in session.state.trajectory],
            "insight": attempt_insight(result.accuracy, session.state.quiz.topic_name),
        }

    async def _get_performance(self, params: HistoryParams) -> dict:
        attempts = self._history(params)
        return {
            "performances": [p.to_dict() for p in topic_performances(attempts)],
            "streak": calc_streak([a.completed_at for a in attempts], today=params.today),
            "attemptCount": len(attempts),
        }

    async def _get_recommendations(self, params: HistoryParams) -> dict:
        performances = topic_performances(self._history(params))
        recommendation = await self.recommender.recommend(performances)
        return {"recommendation": recommendation.to_dict()}

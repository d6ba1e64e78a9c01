from __future__ import annotations

import math
from typing import Dict, List, Mapping, Optional, Sequence

from models.progress import QuizResult
from models.week import McqQuestion, ShortAnswerQuestion


def score_quiz(questions: Sequence, answers: Mapping[int, int]) -> QuizResult:
    """Score multiple-choice questions; short answers are never graded, only their sample answer is returned."""
    correct = 0
    total = 0
    incorrect: List[int] = []
    sample_answers: Dict[int, Optional[str]] = {}
    for index, question in enumerate(questions):
        if isinstance(question, ShortAnswerQuestion):
            sample_answers[index] = question.sample_answer
            continue
        total += 1
        if answers.get(index) == question.correct_answer:
            correct += 1
        else:
            incorrect.append(index)
    percent = math.floor(correct / total * 100 + 0.5) if total else 0
    return QuizResult(
        correct=correct,
        total=total,
        percent=percent,
        sample_answers=sample_answers,
        incorrect=incorrect,
    )


class QuizAlreadySubmitted(Exception):
    pass


class QuizAttempt:
    """One sitting of a week's quiz: pick answers, submit once, or reset to try again."""

    def __init__(self, questions: Sequence):
        self.questions = list(questions)
        self.answers: Dict[int, int] = {}
        self.result: Optional[QuizResult] = None

    @property
    def submitted(self) -> bool:
        return self.result is not None

    def select(self, question_index: int, option_index: int) -> None:
        if self.submitted:
            raise QuizAlreadySubmitted("Reset the attempt before changing answers")
        if not 0 <= question_index < len(self.questions):
            raise IndexError(f"No question at index {question_index}")
        question = self.questions[question_index]
        if not isinstance(question, McqQuestion):
            raise ValueError("Only multiple-choice questions take an option")
        if not 0 <= option_index < len(question.options):
            raise IndexError(f"No option at index {option_index}")
        self.answers[question_index] = option_index

    def submit(self) -> QuizResult:
        if self.submitted:
            raise QuizAlreadySubmitted("Quiz already submitted")
        self.result = score_quiz(self.questions, self.answers)
        return self.result

    def reset(self) -> None:
        self.answers = {}
        self.result = None

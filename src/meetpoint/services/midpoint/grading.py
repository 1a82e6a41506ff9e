"""Scoring of candidate stations over the full result matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from ...config import settings
from ...errors import NoCandidateFound
from ...models.domain import Candidate, Point, ResultMatrix, durations_for

ScoreFunction = Callable[[Sequence[int], bool], float]


@dataclass(frozen=True, slots=True)
class WeightedBonusScore:
    """Total travel time, reduced by a fixed bonus for curated stations."""

    bonus_seconds: float

    def __call__(self, durations: Sequence[int], is_weighted: bool) -> float:
        total = float(sum(durations))
        if is_weighted:
            total -= self.bonus_seconds
        return total


def default_score() -> WeightedBonusScore:
    return WeightedBonusScore(bonus_seconds=settings.weighted_station_bonus_seconds)


@dataclass(frozen=True, slots=True)
class StationGrade:
    candidate: Candidate
    durations: tuple[int, ...]
    score: float


class StationGrades:
    """Grades for every candidate; the lowest score is the meeting point."""

    def __init__(self, grades: list[StationGrade]) -> None:
        self.grades = grades

    @classmethod
    def value_of(
        cls,
        points: Iterable[Point],
        candidates: Iterable[Candidate],
        matrix: ResultMatrix,
        score: ScoreFunction | None = None,
    ) -> "StationGrades":
        score = score or default_score()
        sources = list(points)
        grades = []
        for candidate in candidates:
            durations = durations_for(sources, candidate.point, matrix)
            grades.append(
                StationGrade(
                    candidate=candidate,
                    durations=tuple(durations),
                    score=score(durations, candidate.is_weighted),
                )
            )
        return cls(grades)

    def best(self) -> StationGrade:
        if not self.grades:
            raise NoCandidateFound("No candidate stations were found near the input locations.")
        # min() keeps the first of equal scores, i.e. insertion order.
        return min(self.grades, key=lambda grade: grade.score)


def select(
    points: Iterable[Point],
    candidates: Iterable[Candidate],
    matrix: ResultMatrix,
    score: ScoreFunction | None = None,
) -> Candidate:
    return StationGrades.value_of(points, candidates, matrix, score).best().candidate

"""Heuristic relevance scoring of discovered documents against a project name."""

import random
from typing import Optional

MAX_SCORE = 100.0

# 토큰이 파일명/본문에 등장할 때의 가산점
NAME_TOKEN_POINTS = 10
CONTENT_TOKEN_POINTS = 5

# 프로젝트 문서에 자주 등장하는 키워드와 가산점
RELEVANT_KEYWORDS = (
    "specification",
    "requirement",
    "design",
    "scope",
    "objective",
    "deliverable",
    "milestone",
    "budget",
    "timeline",
)
NAME_KEYWORD_POINTS = 8
CONTENT_KEYWORD_POINTS = 3

# 동점 문서의 정렬 순서를 흩뜨리기 위한 작은 무작위 가산점 [0, 5)
TIE_BREAKER_RANGE = 5.0


class RelevanceScorer:
    """
    문서 관련도 점수 계산기.

    무작위 tie-breaker를 포함하므로, 테스트에서는 시드를 고정한 random.Random을 주입합니다.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def score(self, project_name: str, file_name: str, content: str) -> float:
        file_name_lower = file_name.lower()
        content_lower = (content or "").lower()
        score = 0.0

        for token in project_name.lower().split():
            if token in file_name_lower:
                score += NAME_TOKEN_POINTS
            if token in content_lower:
                score += CONTENT_TOKEN_POINTS

        for keyword in RELEVANT_KEYWORDS:
            if keyword in file_name_lower:
                score += NAME_KEYWORD_POINTS
            if keyword in content_lower:
                score += CONTENT_KEYWORD_POINTS

        score += self._rng.random() * TIE_BREAKER_RANGE

        return min(score, MAX_SCORE)


def calculate_relevance_score(
    project_name: str,
    file_name: str,
    content: str,
    rng: Optional[random.Random] = None,
) -> float:
    return RelevanceScorer(rng).score(project_name, file_name, content)

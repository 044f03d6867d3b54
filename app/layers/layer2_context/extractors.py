"""
관련 문서에서 구조화된 정보를 뽑아내는 키워드 기반 추출 함수들입니다.
LLM을 호출하지 않는 순수 함수이며 실패하지 않습니다.
"""

from typing import Iterable

from app.models import (
    MAX_BUSINESS_OBJECTIVES,
    MAX_CONSTRAINTS,
    MAX_KEY_REQUIREMENTS,
    MAX_TECHNICAL_SPECIFICATIONS,
    DocumentType,
    ProjectDocument,
)

REQUIREMENT_LINE_KEYWORDS = ("requirement", "must", "shall")

TECHNICAL_DOCUMENT_KEYWORDS = ("technology", "architecture", "platform")
TECHNICAL_EXCERPT_LENGTH = 200

OBJECTIVE_DOCUMENT_KEYWORDS = ("objective", "goal", "outcome")
OBJECTIVE_LINE_KEYWORDS = ("objective", "goal")

CONSTRAINT_DOCUMENT_KEYWORDS = ("constraint", "limitation", "budget", "timeline")
CONSTRAINT_LINE_KEYWORDS = ("constraint", "budget", "deadline")


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in keywords)


def _matching_lines(content: str, keywords: tuple[str, ...]) -> list[str]:
    return [line.strip() for line in content.split("\n") if _contains_any(line, keywords)]


def extract_key_requirements(documents: list[ProjectDocument]) -> list[str]:
    """요구사항/명세 문서에서 requirement, must, shall이 들어간 줄을 모읍니다."""
    requirements: list[str] = []

    for doc in documents:
        if doc.document_type in (DocumentType.REQUIREMENT, DocumentType.SPECIFICATION):
            requirements.extend(_matching_lines(doc.content, REQUIREMENT_LINE_KEYWORDS))

    return requirements[:MAX_KEY_REQUIREMENTS]


def extract_technical_specifications(documents: list[ProjectDocument]) -> list[str]:
    """
    기술 관련 키워드가 있는 명세/설계 문서마다 발췌문 하나를 만듭니다.

    형식: "From {문서명}: {본문 앞 200자}..."
    """
    specs: list[str] = []

    for doc in documents:
        if doc.document_type not in (DocumentType.SPECIFICATION, DocumentType.DESIGN):
            continue
        if _contains_any(doc.content, TECHNICAL_DOCUMENT_KEYWORDS):
            specs.append(f"From {doc.name}: {doc.content[:TECHNICAL_EXCERPT_LENGTH]}...")

    return specs[:MAX_TECHNICAL_SPECIFICATIONS]


def extract_business_objectives(documents: list[ProjectDocument]) -> list[str]:
    objectives: list[str] = []

    for doc in documents:
        if _contains_any(doc.content, OBJECTIVE_DOCUMENT_KEYWORDS):
            objectives.extend(_matching_lines(doc.content, OBJECTIVE_LINE_KEYWORDS))

    return objectives[:MAX_BUSINESS_OBJECTIVES]


def extract_constraints(documents: list[ProjectDocument]) -> list[str]:
    # 문서 선별 키워드(timeline, limitation 포함)와 줄 선별 키워드(deadline 포함)가 다름
    constraints: list[str] = []

    for doc in documents:
        if _contains_any(doc.content, CONSTRAINT_DOCUMENT_KEYWORDS):
            constraints.extend(_matching_lines(doc.content, CONSTRAINT_LINE_KEYWORDS))

    return constraints[:MAX_CONSTRAINTS]

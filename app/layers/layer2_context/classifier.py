"""Keyword-based document type classifier."""

from typing import NamedTuple, Optional

from app.models import DocumentType


class ClassificationRule(NamedTuple):
    document_type: DocumentType
    name_keywords: tuple[str, ...]
    content_keywords: tuple[str, ...]


# 순서가 중요합니다: 위에서부터 검사하여 처음 일치하는 유형을 사용합니다.
# (예: 명세서 본문에 "business proposal"이 있어도 specification으로 분류)
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(DocumentType.RFP, ("rfp", "request for proposal"), ()),
    ClassificationRule(DocumentType.SPECIFICATION, ("spec", "specification"), ("technical specification",)),
    ClassificationRule(DocumentType.REQUIREMENT, ("requirement",), ("requirements",)),
    ClassificationRule(DocumentType.DESIGN, ("design", "architecture"), ("system design",)),
    ClassificationRule(DocumentType.CONTRACT, ("contract", "agreement"), ("terms and conditions",)),
    ClassificationRule(DocumentType.PROPOSAL, ("proposal",), ("business proposal",)),
)


def classify_document_type(file_name: str, content: Optional[str] = None) -> DocumentType:
    """
    파일명과 내용으로 문서 유형을 분류합니다. 항상 값을 반환합니다 (기본 OTHER).

    >>> classify_document_type("Project_RFP_v2.pdf")
    <DocumentType.RFP: 'rfp'>
    """
    name_lower = file_name.lower()
    content_lower = (content or "").lower()

    for rule in CLASSIFICATION_RULES:
        if any(keyword in name_lower for keyword in rule.name_keywords):
            return rule.document_type
        if any(keyword in content_lower for keyword in rule.content_keywords):
            return rule.document_type

    return DocumentType.OTHER

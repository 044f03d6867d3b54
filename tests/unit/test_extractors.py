"""Unit tests for keyword-based structured field extraction."""

from app.layers.layer2_context import (
    extract_business_objectives,
    extract_constraints,
    extract_key_requirements,
    extract_technical_specifications,
)
from app.models import DocumentType, ProjectDocument


def make_doc(name, content, document_type=DocumentType.OTHER):
    return ProjectDocument(
        id=name,
        name=name,
        mime_type="text/plain",
        content=content,
        document_type=document_type,
        relevance_score=50.0,
    )


class TestKeyRequirements:
    def test_collects_matching_lines_from_requirement_docs(self):
        doc = make_doc(
            "reqs.txt",
            "Intro text\n  The system must support SSO  \nUsers shall reset passwords\nFooter",
            DocumentType.REQUIREMENT,
        )
        assert extract_key_requirements([doc]) == [
            "The system must support SSO",
            "Users shall reset passwords",
        ]

    def test_ignores_other_document_types(self):
        doc = make_doc("notes.txt", "The system must support SSO", DocumentType.DESIGN)
        assert extract_key_requirements([doc]) == []

    def test_capped_at_ten(self):
        content = "\n".join(f"Requirement {i}" for i in range(25))
        doc = make_doc("spec.txt", content, DocumentType.SPECIFICATION)
        result = extract_key_requirements([doc])
        assert len(result) == 10
        assert result[0] == "Requirement 0"


class TestTechnicalSpecifications:
    def test_excerpt_format(self):
        content = "Architecture overview. " + "x" * 300
        doc = make_doc("design.txt", content, DocumentType.DESIGN)
        result = extract_technical_specifications([doc])
        assert result == [f"From design.txt: {content[:200]}..."]

    def test_requires_technical_keyword(self):
        doc = make_doc("design.txt", "Colour palette and fonts", DocumentType.DESIGN)
        assert extract_technical_specifications([doc]) == []

    def test_capped_at_five(self):
        docs = [
            make_doc(f"spec{i}.txt", "Platform choices", DocumentType.SPECIFICATION)
            for i in range(8)
        ]
        assert len(extract_technical_specifications(docs)) == 5


class TestBusinessObjectives:
    def test_collects_goal_and_objective_lines(self):
        doc = make_doc("brief.txt", "Goal: reduce costs\nBackground\nObjective: improve NPS\nExpected outcome")
        assert extract_business_objectives([doc]) == ["Goal: reduce costs", "Objective: improve NPS"]

    def test_document_without_keywords_is_skipped(self):
        doc = make_doc("misc.txt", "Nothing relevant")
        assert extract_business_objectives([doc]) == []

    def test_capped_at_eight(self):
        doc = make_doc("goals.txt", "\n".join(f"goal {i}" for i in range(12)))
        assert len(extract_business_objectives([doc])) == 8


class TestConstraints:
    def test_line_keywords_differ_from_document_keywords(self):
        # timeline으로 문서는 선택되지만 timeline만 있는 줄은 수집되지 않음
        doc = make_doc("plan.txt", "Timeline: 6 months\nBudget capped at $100k\nDeadline is March")
        assert extract_constraints([doc]) == ["Budget capped at $100k", "Deadline is March"]

    def test_capped_at_six(self):
        doc = make_doc("limits.txt", "\n".join(f"constraint {i}" for i in range(10)))
        assert len(extract_constraints([doc])) == 6


def test_extractors_handle_empty_input():
    assert extract_key_requirements([]) == []
    assert extract_technical_specifications([]) == []
    assert extract_business_objectives([]) == []
    assert extract_constraints([]) == []

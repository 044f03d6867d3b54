"""Layer 2: Project Context - RFP related document discovery and aggregation."""

from .analyzer import ProjectAnalyzer
from .classifier import classify_document_type
from .content_extractor import DocumentContentExtractor
from .extractors import (
    extract_business_objectives,
    extract_constraints,
    extract_key_requirements,
    extract_technical_specifications,
)
from .finder import ProjectDocumentFinder, build_search_queries
from .scorer import RelevanceScorer, calculate_relevance_score

__all__ = [
    "ProjectAnalyzer",
    "ProjectDocumentFinder",
    "DocumentContentExtractor",
    "RelevanceScorer",
    "build_search_queries",
    "classify_document_type",
    "calculate_relevance_score",
    "extract_key_requirements",
    "extract_technical_specifications",
    "extract_business_objectives",
    "extract_constraints",
]

"""Data models for the proposal generation system."""

from .project import (
    DocumentType,
    DriveFile,
    DriveFileList,
    DocumentMetadata,
    ProjectDocument,
    ProjectContext,
    DOCUMENT_CONTENT_LIMIT,
    MAX_RELATED_DOCUMENTS,
    MAX_KEY_REQUIREMENTS,
    MAX_TECHNICAL_SPECIFICATIONS,
    MAX_BUSINESS_OBJECTIVES,
    MAX_CONSTRAINTS,
)
from .proposal import (
    ANALYSIS_FIELDS,
    STATE_FIELDS,
    StructuredAnalysis,
    FallbackAnalysis,
    RequirementsAnalysis,
    ProposalState,
    WorkflowStatus,
    WorkflowEvent,
    ProcessingInfo,
    EnhancedProposalResult,
    PROCESSING_STEPS,
    WORDS_PER_PAGE,
    estimate_pages,
    RequirementsSummary,
)
from .error import ErrorResponse

__all__ = [
    # Project context models
    "DocumentType",
    "DriveFile",
    "DriveFileList",
    "DocumentMetadata",
    "ProjectDocument",
    "ProjectContext",
    "DOCUMENT_CONTENT_LIMIT",
    "MAX_RELATED_DOCUMENTS",
    "MAX_KEY_REQUIREMENTS",
    "MAX_TECHNICAL_SPECIFICATIONS",
    "MAX_BUSINESS_OBJECTIVES",
    "MAX_CONSTRAINTS",
    # Workflow models
    "ANALYSIS_FIELDS",
    "STATE_FIELDS",
    "StructuredAnalysis",
    "FallbackAnalysis",
    "RequirementsAnalysis",
    "ProposalState",
    "WorkflowStatus",
    "WorkflowEvent",
    "ProcessingInfo",
    "EnhancedProposalResult",
    "PROCESSING_STEPS",
    "WORDS_PER_PAGE",
    "estimate_pages",
    "RequirementsSummary",
    # Error models
    "ErrorResponse",
]

"""Layer 3: Proposal Workflow - analyze, outline, generate, review, finalize."""

from .base_stage import BaseStage
from .stages import AnalyzeStage, OutlineStage, GenerateStage, ReviewStage, FinalizeStage
from .workflow import ProposalWorkflow, default_stages

__all__ = [
    "BaseStage",
    "AnalyzeStage",
    "OutlineStage",
    "GenerateStage",
    "ReviewStage",
    "FinalizeStage",
    "ProposalWorkflow",
    "default_stages",
]

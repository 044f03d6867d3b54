"""Processing layers for the proposal generation pipeline."""

# Note: Import layers individually to avoid circular imports
# Use: from app.layers.layer2_context import ProjectAnalyzer
# Use: from app.layers.layer3_workflow import ProposalWorkflow

__all__ = [
    "layer2_context",
    "layer3_workflow",
]

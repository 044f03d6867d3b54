"""Services for the proposal generation system."""

from .claude_client import ClaudeClient, get_claude_client
from .drive_client import DriveClient
from .pdf_service import PDFService, PDFHealthReport, get_pdf_service

# Note: ProposalOrchestrator imports the layers, which import this package.
# Use: from app.services.orchestrator import ProposalOrchestrator

__all__ = [
    "ClaudeClient",
    "get_claude_client",
    "DriveClient",
    "PDFService",
    "PDFHealthReport",
    "get_pdf_service",
]

"""
RFP PDF 업로드 API 통합 테스트.
PDF 텍스트 추출과 워크플로우는 mock으로 대체합니다.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock

from app.main import app
from app.models import ProposalState
from app.services import PDFService, get_pdf_service
from app.services.orchestrator import get_orchestrator


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def pdf_service(settings):
    service = PDFService(settings)
    service.extract_text = AsyncMock(return_value="Requirements: patient scheduling with SSO login")
    app.dependency_overrides[get_pdf_service] = lambda: service
    return service


@pytest.fixture
def orchestrator():
    orch = AsyncMock()
    orch.run_proposal_workflow.return_value = ProposalState(
        requirements="Requirements: patient scheduling with SSO login",
        outline="OUTLINE",
        full_proposal="DRAFT",
        review="REVIEW",
        final_proposal="FINAL PROPOSAL",
    )
    app.dependency_overrides[get_orchestrator] = lambda: orch
    return orch


async def test_extract_requirements(client: AsyncClient, pdf_service, healthy_pdf_bytes):
    response = await client.post(
        "/api/v1/rfp/extract",
        files={"file": ("rfp.pdf", healthy_pdf_bytes, "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["original_file_name"] == "rfp.pdf"
    assert data["extracted_requirements"] == "Requirements: patient scheduling with SSO login"


async def test_non_pdf_upload_rejected(client: AsyncClient, pdf_service):
    """PDF가 아닌 파일은 400을 반환해야 한다."""
    response = await client.post(
        "/api/v1/rfp/extract",
        files={"file": ("notes.txt", b"plain text", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_INPUT_001"


async def test_upload_generates_proposal(client: AsyncClient, pdf_service, orchestrator, healthy_pdf_bytes):
    response = await client.post(
        "/api/v1/rfp/upload",
        files={"file": ("rfp.pdf", healthy_pdf_bytes, "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["business_proposal"]["final_proposal"] == "FINAL PROPOSAL"
    assert data["processing_info"]["status"] == "finalized"
    orchestrator.run_proposal_workflow.assert_awaited_once_with(
        "Requirements: patient scheduling with SSO login"
    )


async def test_diagnose_reports_health(client: AsyncClient, pdf_service):
    response = await client.post(
        "/api/v1/rfp/diagnose",
        files={"file": ("broken.pdf", b"%PDF-1.4 tiny", "application/pdf")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["health_check"]["is_healthy"] is False
    assert data["recommendations"][0] == "Try using a different PDF file"


async def test_upload_enhanced_requires_token(client: AsyncClient, pdf_service, orchestrator, healthy_pdf_bytes):
    response = await client.post(
        "/api/v1/rfp/upload-enhanced",
        files={"file": ("rfp.pdf", healthy_pdf_bytes, "application/pdf")},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"

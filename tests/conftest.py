"""공유 pytest fixture 모음."""

import random

import pytest
from unittest.mock import AsyncMock

from app.config import Settings
from app.layers.layer2_context import RelevanceScorer
from app.layers.layer3_workflow.prompts.workflow_prompts import (
    ANALYZE_SYSTEM_PROMPT,
    FINALIZE_SYSTEM_PROMPT,
    GENERATE_SYSTEM_PROMPT,
    OUTLINE_SYSTEM_PROMPT,
    REVIEW_SYSTEM_PROMPT,
)
from app.models import DriveFile, DriveFileList


STAGE_BY_SYSTEM_PROMPT = {
    ANALYZE_SYSTEM_PROMPT: "analyze",
    OUTLINE_SYSTEM_PROMPT: "outline",
    GENERATE_SYSTEM_PROMPT: "generate",
    REVIEW_SYSTEM_PROMPT: "review",
    FINALIZE_SYSTEM_PROMPT: "finalize",
}


class StageMarkerLLM:
    """입력 프롬프트 뒤에 [STAGE:<단계명>] 표시를 붙여 돌려주는 가짜 LLM."""

    def __init__(self):
        self.calls: list[str] = []

    async def complete(self, system_prompt, user_prompt, max_tokens=4096, temperature=0.7):
        stage = STAGE_BY_SYSTEM_PROMPT.get(system_prompt, "unknown")
        self.calls.append(stage)
        return f"{user_prompt}\n[STAGE:{stage}]"


# 유효한 PDF 헤더/객체/트레일러를 가진 바이트 (상태 점검 통과용, 100바이트 이상)
HEALTHY_PDF_BYTES = (
    b"%PDF-1.4\n"
    b"1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    b"2 0 obj\n<< /Type /Pages /Kids [] /Count 0 >>\nendobj\n"
    b"trailer\n<< /Root 1 0 R >>\n"
    b"%%EOF\n"
)


@pytest.fixture
def settings():
    """테스트용 Settings (.env 파일을 읽지 않음)."""
    return Settings(_env_file=None, context_max_concurrency=2, claude_retry_delay=0.0)


@pytest.fixture
def mock_claude_client():
    """ClaudeClient mock fixture."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value="mocked response")
    client.complete_json = AsyncMock(return_value={})
    return client


@pytest.fixture
def stage_marker_llm():
    return StageMarkerLLM()


@pytest.fixture
def seeded_scorer():
    """시드를 고정한 관련도 계산기."""
    return RelevanceScorer(rng=random.Random(42))


@pytest.fixture
def sample_drive_files():
    """Drive 검색 결과 fixture (Drive API camelCase 형식)."""
    return [
        DriveFile.model_validate({
            "id": "file-spec",
            "name": "Patient Portal Technical Specification.pdf",
            "mimeType": "application/pdf",
            "size": "2048",
            "createdTime": "2024-01-01T00:00:00Z",
            "modifiedTime": "2024-01-05T00:00:00Z",
            "webViewLink": "https://drive.google.com/file/d/file-spec/view",
        }),
        DriveFile.model_validate({
            "id": "file-notes",
            "name": "Kickoff meeting notes",
            "mimeType": "application/vnd.google-apps.document",
        }),
        DriveFile.model_validate({
            "id": "file-budget",
            "name": "budget.txt",
            "mimeType": "text/plain",
        }),
    ]


@pytest.fixture
def mock_drive_client(sample_drive_files):
    """DriveClient mock fixture. 모든 쿼리가 같은 파일 목록을 돌려줍니다."""
    client = AsyncMock()
    client.search = AsyncMock(return_value=DriveFileList(files=sample_drive_files))
    client.list_files = AsyncMock(return_value=DriveFileList(files=sample_drive_files))
    client.search_pdf_files = AsyncMock(return_value=DriveFileList(files=sample_drive_files[:1]))
    client.get_file_metadata = AsyncMock(return_value=sample_drive_files[0])
    client.download = AsyncMock(return_value=b"Budget constraint: under $200k\nDeadline is Q3")
    client.export_google_doc = AsyncMock(return_value=b"Goal: reduce no-show rate\nObjective: HIPAA compliance")
    return client


@pytest.fixture
def async_client():
    """httpx AsyncClient fixture (FastAPI 테스트용)."""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def healthy_pdf_bytes():
    return HEALTHY_PDF_BYTES

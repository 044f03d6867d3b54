"""Unit tests for PDFService."""

import pytest
from unittest.mock import AsyncMock, patch

from app.exceptions import InputValidationError, ParsingError
from app.services.pdf_service import PDFService, SECTION_WINDOW


@pytest.fixture
def pdf_service(settings):
    return PDFService(settings)


class TestCheckHealth:
    def test_healthy(self, pdf_service, healthy_pdf_bytes):
        report = pdf_service.check_health(healthy_pdf_bytes)

        assert report.is_healthy
        assert report.issues == []

    @pytest.mark.parametrize(
        "data, issue",
        [
            (b"", "Empty or null buffer"),
            (b"%PDF-1.4 tiny", "File too small to be a valid PDF"),
            (b"<html>" + b"x" * 200, "Invalid PDF header"),
        ],
    )
    def test_fails_fast(self, pdf_service, data, issue):
        report = pdf_service.check_health(data)

        assert not report.is_healthy
        assert report.issues == [issue]

    def test_missing_trailer_and_objects(self, pdf_service):
        report = pdf_service.check_health(b"%PDF-1.4\n" + b"x" * 200)

        assert not report.is_healthy
        assert report.issues == ["Missing or corrupted PDF trailer", "Missing PDF object structure"]


class TestExtractRfpRequirements:
    def test_collects_section_windows(self, pdf_service):
        text = "Intro text.\n\nScope of Work:   build a patient portal.\n"

        assert pdf_service.extract_rfp_requirements(text) == "Scope of Work: build a patient portal."

    def test_window_length(self, pdf_service):
        text = "Deliverables " + "y" * (SECTION_WINDOW * 2)

        assert len(pdf_service.extract_rfp_requirements(text)) == SECTION_WINDOW

    def test_without_sections_uses_whole_text(self, pdf_service):
        assert pdf_service.extract_rfp_requirements("Hello   world\n\n") == "Hello world"

    def test_control_characters_removed(self, pdf_service):
        assert pdf_service.extract_rfp_requirements("a\x07b") == "a b"

    def test_truncated_to_limit(self, settings):
        service = PDFService(settings.model_copy(update={"requirements_text_limit": 50}))

        assert service.extract_rfp_requirements("x" * 100) == "x" * 50 + "..."


class TestExtractText:
    def test_garbage_raises_parsing_error(self, pdf_service):
        with pytest.raises(ParsingError) as exc_info:
            pdf_service._extract_text_sync(b"this is definitely not a pdf")

        assert exc_info.value.error_code == "ERR_PARSE_001"
        assert exc_info.value.__cause__ is not None


class TestExtractRequirementsFromPdf:
    async def test_success(self, pdf_service, healthy_pdf_bytes):
        with patch.object(pdf_service, "extract_text", AsyncMock(return_value="Requirements: SSO login")):
            result = await pdf_service.extract_requirements_from_pdf(healthy_pdf_bytes)

        assert result == "Requirements: SSO login"

    async def test_unhealthy_pdf_rejected(self, pdf_service):
        with pytest.raises(InputValidationError) as exc_info:
            await pdf_service.extract_requirements_from_pdf(b"%PDF-1.4 tiny")

        assert exc_info.value.details == {"issues": ["File too small to be a valid PDF"]}

    async def test_blank_text_rejected(self, pdf_service, healthy_pdf_bytes):
        with patch.object(pdf_service, "extract_text", AsyncMock(return_value=" \n ")):
            with pytest.raises(InputValidationError):
                await pdf_service.extract_requirements_from_pdf(healthy_pdf_bytes)


class TestValidateUpload:
    def test_accepts_pdf(self, pdf_service, healthy_pdf_bytes):
        assert pdf_service.validate_upload("rfp.pdf", "application/pdf", healthy_pdf_bytes) == "rfp.pdf"

    def test_rejects_docx(self, pdf_service, healthy_pdf_bytes):
        with pytest.raises(InputValidationError):
            pdf_service.validate_upload("rfp.docx", "application/pdf", healthy_pdf_bytes)

    def test_rejects_mismatched_signature(self, pdf_service):
        with pytest.raises(InputValidationError):
            pdf_service.validate_upload("rfp.pdf", "application/pdf", b"PK\x03\x04" + b"0" * 200)

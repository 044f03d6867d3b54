"""
RFP PDF 업로드 API입니다.
업로드된 PDF에서 요구사항을 추출하고, 필요하면 Drive 프로젝트 컨텍스트를 더해 제안서를 생성합니다.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.dependencies import get_drive_client
from app.api.responses import build_enhanced_response, build_proposal_response
from app.exceptions import InputValidationError, ParsingError
from app.services import DriveClient, PDFService, get_pdf_service
from app.services.orchestrator import ProposalOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

TEXT_SAMPLE_LENGTH = 200


async def _read_rfp(file: UploadFile, pdf_service: PDFService) -> tuple[str, str]:
    """업로드 파일을 검증하고 (파일명, 요구사항 텍스트)를 반환합니다."""
    content = await file.read()
    safe_name = pdf_service.validate_upload(file.filename or "", file.content_type, content)
    requirements = await pdf_service.extract_requirements_from_pdf(content)
    return safe_name, requirements


@router.post("/extract")
async def extract_requirements(
    file: UploadFile = File(...),
    pdf_service: PDFService = Depends(get_pdf_service),
) -> dict:
    """PDF에서 요구사항 텍스트만 추출하는 API"""
    safe_name, requirements = await _read_rfp(file, pdf_service)

    return {
        "message": "Requirements extracted successfully",
        "original_file_name": safe_name,
        "extracted_requirements": requirements,
        "word_count": len(requirements.split()),
    }


@router.post("/diagnose")
async def diagnose_pdf(
    file: UploadFile = File(...),
    pdf_service: PDFService = Depends(get_pdf_service),
) -> dict:
    """
    PDF 진단 API.
    업로드가 실패하는 PDF의 원인을 확인할 수 있도록 검증/상태/추출 결과를 모두 보여줍니다.
    """
    content = await file.read()

    validation_error = None
    try:
        pdf_service.validate_upload(file.filename or "", file.content_type, content)
    except InputValidationError as e:
        validation_error = e.message

    health = pdf_service.check_health(content)

    text_sample = "Could not extract text"
    extraction_error = None
    try:
        full_text = await pdf_service.extract_text(content)
        text_sample = full_text[:TEXT_SAMPLE_LENGTH] + ("..." if len(full_text) > TEXT_SAMPLE_LENGTH else "")
    except ParsingError as e:
        extraction_error = e.message

    if health.is_healthy:
        recommendations = ["PDF appears to be healthy and should process correctly"]
    else:
        recommendations = [
            "Try using a different PDF file",
            "Ensure the PDF is not password-protected",
            "Check if the PDF was created properly",
            "Try converting the PDF using a different tool",
        ]

    return {
        "message": "PDF diagnostic completed",
        "file_info": {
            "original_name": file.filename,
            "mime_type": file.content_type,
            "size": len(content),
            "size_formatted": f"{len(content) / 1024:.2f} KB",
        },
        "is_valid_pdf": validation_error is None,
        "validation_error": validation_error,
        "health_check": health.model_dump(),
        "text_sample": text_sample,
        "extraction_error": extraction_error,
        "recommendations": recommendations,
    }


@router.post("/upload")
async def upload_rfp(
    file: UploadFile = File(...),
    pdf_service: PDFService = Depends(get_pdf_service),
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
) -> dict:
    """RFP PDF를 업로드하여 제안서를 생성하는 API"""
    safe_name, requirements = await _read_rfp(file, pdf_service)

    state = await orchestrator.run_proposal_workflow(requirements)
    logger.info(f"[RFP] 제안서 생성 완료: {safe_name}")

    return build_proposal_response(
        "Business proposal generated successfully", requirements, state, file_name=safe_name
    )


@router.post("/upload-enhanced")
async def upload_rfp_enhanced(
    file: UploadFile = File(...),
    pdf_service: PDFService = Depends(get_pdf_service),
    orchestrator: ProposalOrchestrator = Depends(get_orchestrator),
    drive_client: DriveClient = Depends(get_drive_client),
) -> dict:
    """
    RFP PDF와 Google Drive 관련 문서를 함께 분석하여 제안서를 생성하는 API.
    Authorization: Bearer <Google access token> 헤더가 필요합니다.
    """
    safe_name, requirements = await _read_rfp(file, pdf_service)

    result = await orchestrator.generate_enhanced_proposal(requirements, drive_client)
    logger.info(f"[RFP] 확장 제안서 생성 완료: {safe_name} (컨텍스트 {'사용' if result.context else '미사용'})")

    return build_enhanced_response(
        "Enhanced project-based business proposal generated successfully",
        requirements, result, file_name=safe_name,
    )

"""
프로젝트 컨텍스트 분석 관련 데이터 모델입니다.
Google Drive 파일 정보, 분석된 관련 문서, 최종 프로젝트 컨텍스트를 정의합니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


# 관련 문서 1건당 보관하는 최대 글자 수 (메모리/토큰 사용량 제한)
DOCUMENT_CONTENT_LIMIT = 10000

# 상세 분석 대상 관련 문서 최대 개수
MAX_RELATED_DOCUMENTS = 10

# 추출 항목별 최대 개수
MAX_KEY_REQUIREMENTS = 10
MAX_TECHNICAL_SPECIFICATIONS = 5
MAX_BUSINESS_OBJECTIVES = 8
MAX_CONSTRAINTS = 6


class DocumentType(str, Enum):
    """
    관련 문서 분류 결과입니다.
    분류기는 위에서부터 순서대로 검사하며 처음 일치하는 유형을 사용합니다.
    """

    RFP = "rfp"
    SPECIFICATION = "specification"
    REQUIREMENT = "requirement"
    DESIGN = "design"
    CONTRACT = "contract"
    PROPOSAL = "proposal"
    OTHER = "other"


class DriveFile(BaseModel):
    """Google Drive 검색 결과의 파일 정보 (Drive API의 camelCase 필드를 그대로 받습니다)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    mime_type: str = Field("application/octet-stream", alias="mimeType")
    size: Optional[str] = None
    created_time: Optional[str] = Field(None, alias="createdTime")
    modified_time: Optional[str] = Field(None, alias="modifiedTime")
    web_view_link: Optional[str] = Field(None, alias="webViewLink")
    thumbnail_link: Optional[str] = Field(None, alias="thumbnailLink")


class DriveFileList(BaseModel):
    """files.list 응답 한 페이지."""

    model_config = ConfigDict(populate_by_name=True)

    files: list[DriveFile] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")


class DocumentMetadata(BaseModel):
    """관련 문서의 부가 정보."""

    size: Optional[str] = None
    created_time: Optional[str] = None
    modified_time: Optional[str] = None
    web_view_link: str = ""


class ProjectDocument(BaseModel):
    """분석이 끝난 관련 문서 1건."""

    id: str
    name: str
    mime_type: str
    content: str = Field("", description="추출된 텍스트 (실패 시 [..] 형태의 에러 표시)")
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    document_type: DocumentType = DocumentType.OTHER
    relevance_score: float = Field(0.0, ge=0, le=100, description="프로젝트 관련도 (0-100)")

    @field_validator("content")
    @classmethod
    def _truncate_content(cls, value: str) -> str:
        return value[:DOCUMENT_CONTENT_LIMIT]

    @classmethod
    def from_drive_file(
        cls,
        file: DriveFile,
        content: str,
        document_type: DocumentType,
        relevance_score: float,
    ) -> "ProjectDocument":
        return cls(
            id=file.id,
            name=file.name,
            mime_type=file.mime_type,
            content=content,
            metadata=DocumentMetadata(
                size=file.size,
                created_time=file.created_time,
                modified_time=file.modified_time,
                web_view_link=file.web_view_link or "",
            ),
            document_type=document_type,
            relevance_score=relevance_score,
        )

    @classmethod
    def for_rfp(cls, rfp_text: str, rfp_file_id: Optional[str] = None) -> "ProjectDocument":
        """분석 기준이 되는 RFP 자체를 문서로 표현합니다. 관련도는 항상 100입니다."""
        now = datetime.now().isoformat()
        return cls(
            id=rfp_file_id or "uploaded-rfp",
            name="RFP Document",
            mime_type="application/pdf",
            content=rfp_text,
            metadata=DocumentMetadata(created_time=now, modified_time=now),
            document_type=DocumentType.RFP,
            relevance_score=100.0,
        )


class ProjectContext(BaseModel):
    """
    프로젝트 컨텍스트 분석의 최종 결과입니다.
    한 번 생성되면 변경되지 않으며, 확장 프롬프트 생성에 한 번 사용됩니다.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    project_summary: str
    rfp_document: ProjectDocument
    related_documents: list[ProjectDocument] = Field(
        default_factory=list, max_length=MAX_RELATED_DOCUMENTS
    )
    key_requirements: list[str] = Field(default_factory=list, max_length=MAX_KEY_REQUIREMENTS)
    technical_specifications: list[str] = Field(
        default_factory=list, max_length=MAX_TECHNICAL_SPECIFICATIONS
    )
    business_objectives: list[str] = Field(default_factory=list, max_length=MAX_BUSINESS_OBJECTIVES)
    constraints: list[str] = Field(default_factory=list, max_length=MAX_CONSTRAINTS)

    @field_validator("related_documents")
    @classmethod
    def _sort_by_relevance(cls, documents: list[ProjectDocument]) -> list[ProjectDocument]:
        return sorted(documents, key=lambda doc: doc.relevance_score, reverse=True)

    @computed_field
    @property
    def total_documents(self) -> int:
        return len(self.related_documents)

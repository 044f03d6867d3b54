"""
프로젝트 관련 문서 검색기입니다.
여러 개의 휴리스틱 검색 쿼리를 Drive에 보내고 결과를 중복 없이 합칩니다.
"""

import asyncio
import logging
from typing import Optional

from app.models import DriveFile
from app.services.drive_client import DriveClient, escape_query_value

logger = logging.getLogger(__name__)


def build_search_queries(project_name: str) -> list[str]:
    """
    프로젝트명으로 5개의 Drive 검색 쿼리를 만듭니다.

    1. 파일명에 프로젝트명 포함
    2. 본문(full text)에 프로젝트명 포함
    3. 파일명에 프로젝트명 첫 단어 포함
    4. 명세/요구사항/설계 문서
    5. 제안서/계약서/범위 문서
    """
    words = project_name.split()
    first_word = words[0] if words else project_name

    name = escape_query_value(project_name)
    first = escape_query_value(first_word)

    return [
        f"name contains '{name}'",
        f"fullText contains '{name}'",
        f"name contains '{first}'",
        "name contains 'specification' or name contains 'requirement' or name contains 'design'",
        "name contains 'proposal' or name contains 'contract' or name contains 'scope'",
    ]


class ProjectDocumentFinder:
    """Drive에서 프로젝트 후보 문서를 찾습니다."""

    def __init__(self, drive_client: DriveClient):
        self.drive_client = drive_client

    async def find(
        self,
        project_name: str,
        exclude_file_id: Optional[str] = None,
    ) -> list[DriveFile]:
        """
        모든 검색 쿼리를 동시에 실행하고 파일 ID 기준으로 중복을 제거합니다.

        개별 쿼리 실패는 경고 로그만 남기고 건너뜁니다. 전체 검색은 중단되지 않습니다.
        결과 순서는 쿼리 순서, 각 쿼리 안에서는 Drive 응답 순서를 따릅니다.

        Args:
            project_name: 검색 기준 프로젝트명
            exclude_file_id: 결과에서 제외할 파일 (원본 RFP)

        Returns:
            중복 제거된 후보 파일 목록 (개수 제한 없음)
        """
        logger.info(f"[ProjectDocumentFinder] 관련 문서 검색 시작: {project_name}")
        queries = build_search_queries(project_name)

        results = await asyncio.gather(
            *[self.drive_client.search(query) for query in queries],
            return_exceptions=True,
        )

        all_files: list[DriveFile] = []
        seen_ids: set[str] = set()
        failed = 0

        for query, result in zip(queries, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                failed += 1
                logger.warning(f"[ProjectDocumentFinder] 검색 쿼리 실패, 건너뜀: {query} ({result})")
                continue

            for file in result.files:
                if file.id in seen_ids or file.id == exclude_file_id:
                    continue
                seen_ids.add(file.id)
                all_files.append(file)

        logger.info(
            f"[ProjectDocumentFinder] 후보 문서 {len(all_files)}건 발견 "
            f"(쿼리 {len(queries) - failed}/{len(queries)} 성공)"
        )
        return all_files

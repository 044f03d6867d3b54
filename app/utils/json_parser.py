"""LLM 응답에서 JSON을 꺼내는 유틸리티.

Claude의 응답은 종종 마크다운 코드 블록이나 설명 문장을 포함하므로,
2단계 파싱 전략을 사용합니다.

┌─────────────────────────────────────────────────────────────┐
│ 단계     │ 방법                     │ 성공 시               │
├─────────────────────────────────────────────────────────────┤
│ 1. 직접  │ 마크다운 제거 후 파싱    │ 바로 반환             │
│ 2. 추출  │ JSON 구조 찾아서 파싱    │ 추출된 JSON 반환      │
│ 실패     │ -                        │ ValueError 발생       │
└─────────────────────────────────────────────────────────────┘
"""

import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """```json ... ``` 형태의 코드 블록 표시를 제거합니다."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def extract_json(response: Optional[str]) -> Any:
    """
    응답 텍스트에서 JSON 값을 파싱합니다.

    처리 가능한 응답 형식 예시:
    - 순수 JSON: {"key": "value"}
    - 코드 블록: ```json\\n{"key": "value"}\\n```
    - 텍스트 포함: Here is the analysis: {"key": "value"}

    Args:
        response: LLM의 원시 응답 텍스트

    Returns:
        파싱된 JSON 객체 또는 배열

    Raises:
        ValueError: JSON을 찾지 못했거나 파싱에 실패한 경우
    """
    if not response or not response.strip():
        raise ValueError("Empty response, no JSON to parse")

    cleaned = strip_code_fences(response)

    # 1단계: 직접 파싱
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.debug(f"[JSON] 직접 파싱 실패: {e}")
        first_error = e

    # 2단계: 응답 안에서 JSON 객체/배열 시작점을 찾아 그 위치부터 하나의 JSON 값만 디코딩
    # (raw_decode는 문자열 안의 괄호를 올바르게 건너뜀)
    decoder = json.JSONDecoder()
    for bracket in ("{", "["):
        start_idx = cleaned.find(bracket)
        if start_idx == -1:
            continue
        try:
            value, _ = decoder.raw_decode(cleaned, start_idx)
            return value
        except json.JSONDecodeError as e:
            logger.debug(f"[JSON] 추출 파싱 실패 ({bracket}): {e}")

    raise ValueError(f"Failed to parse JSON response: {first_error}")

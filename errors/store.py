"""
Error Log Store

오류 로그 저장소 - 기록, 조회, 집계
"""

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from core.logging_config import setup_logger
from errors.models import ErrorCategory, ErrorLogEntry, ErrorSeverity, utcnow

logger = setup_logger(__name__)

DAY = timedelta(hours=24)


class ErrorLog:
    """
    오류 로그 저장소

    추가 전용 인메모리 저장소. 엔트리는 개별 삭제되지 않고
    `clear()`로만 일괄 삭제됩니다.
    """

    def __init__(self):
        self._entries: Dict[str, ErrorLogEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def store(self, entry: ErrorLogEntry) -> ErrorLogEntry:
        """엔트리 기록"""
        self._entries[entry.id] = entry
        return entry

    def get(self, entry_id: str) -> Optional[ErrorLogEntry]:
        return self._entries.get(entry_id)

    def all(self) -> List[ErrorLogEntry]:
        return list(self._entries.values())

    def query(
        self,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        resolved: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[ErrorLogEntry]:
        """
        필터 조회

        Args:
            category: 카테고리 필터
            severity: 심각도 필터
            resolved: 해결 여부 필터
            limit: 최대 개수 (정렬 후 적용, 0/None은 제한 없음)

        Returns:
            최신순 정렬된 엔트리 목록
        """
        entries = self.all()

        if category is not None:
            category = ErrorCategory(category)
            entries = [e for e in entries if e.category == category]
        if severity is not None:
            severity = ErrorSeverity(severity)
            entries = [e for e in entries if e.severity == severity]
        if resolved is not None:
            entries = [e for e in entries if e.resolved == resolved]

        entries.sort(key=lambda e: e.created_at, reverse=True)

        if limit:
            entries = entries[:limit]
        return entries

    def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """오류 통계"""
        now = now or utcnow()
        entries = self.all()

        by_category: Dict[str, int] = {}
        by_severity: Dict[str, int] = {}
        for entry in entries:
            by_category[entry.category.value] = by_category.get(entry.category.value, 0) + 1
            by_severity[entry.severity.value] = by_severity.get(entry.severity.value, 0) + 1

        resolved = sum(1 for e in entries if e.resolved)
        return {
            "total": len(entries),
            "by_category": by_category,
            "by_severity": by_severity,
            "resolved": resolved,
            "unresolved": len(entries) - resolved,
            "last_24_hours": sum(1 for e in entries if now - e.created_at < DAY),
        }

    def resolve_by_id(self, entry_id: str) -> bool:
        """
        수동 해결 처리

        이미 해결된 엔트리는 그대로 두고 성공을 반환합니다.
        알 수 없는 ID는 False.
        """
        entry = self._entries.get(entry_id)
        if entry is None:
            logger.warning(f"Cannot resolve unknown error: {entry_id}")
            return False
        if entry.mark_resolved("manually_resolved"):
            logger.info(f"Error resolved manually: {entry_id}")
        return True

    def clear(self):
        """전체 삭제 (유지보수/테스트용)"""
        self._entries.clear()
        logger.info("Error logs cleared")

    def export_json(self) -> str:
        """JSON 내보내기"""
        return json.dumps(
            [entry.to_dict() for entry in self._entries.values()],
            indent=2,
            ensure_ascii=False,
            default=str,
        )

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.infra.db.placeholders import count_placeholders

Row = dict[str, Any]
Params = Sequence[Any]


class StorageError(Exception):
    """저장소 작업 실패 - 제약 조건 위반과 연결 오류를 하나로 묶음"""

    def __init__(self, message: str, *, is_integrity_error: bool = False):
        self.is_integrity_error = is_integrity_error
        super().__init__(message)


@dataclass(frozen=True)
class RunResult:
    """변경 쿼리 실행 결과"""

    inserted_id: int | None = None
    row_count: int = 0


def is_insert(query: str) -> bool:
    return query.lstrip().upper().startswith("INSERT")


def check_params(query: str, params: Params) -> None:
    """플레이스홀더 개수와 파라미터 개수가 다르면 드라이버 호출 전에 실패"""
    expected = count_placeholders(query)
    if expected != len(params):
        raise StorageError(f"플레이스홀더 {expected}개, 파라미터 {len(params)}개")


class Database(ABC):
    """백엔드에 상관없이 동일한 비동기 쿼리 인터페이스

    쿼리는 항상 `?` 위치 플레이스홀더로 작성한다.
    """

    dialect: str
    schema: str

    @abstractmethod
    async def connect(self) -> None:
        """연결(또는 풀) 생성"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """연결 종료"""
        pass

    @abstractmethod
    async def get(self, query: str, params: Params = ()) -> Row | None:
        """첫 번째 행 반환, 없으면 None"""
        pass

    @abstractmethod
    async def all(self, query: str, params: Params = ()) -> list[Row]:
        """모든 행 반환, 없으면 빈 리스트"""
        pass

    @abstractmethod
    async def run(self, query: str, params: Params = ()) -> RunResult:
        """INSERT/UPDATE/DELETE 실행. INSERT는 새 id를 반환"""
        pass

    @abstractmethod
    async def exec(self, script: str) -> None:
        """스키마 DDL 실행 - 시작 시에만 사용"""
        pass

    @abstractmethod
    async def ensure_columns(self, table: str, columns: dict[str, str]) -> None:
        """기존 테이블에 누락된 컬럼 추가"""
        pass

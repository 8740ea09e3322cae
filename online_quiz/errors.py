"""
errors.py — 응시/채점 도메인 예외

서버 측(채점, 저장소)과 클라이언트 측(세션 상태 머신, API 호출) 예외를
한 곳에 모아 둔다. HTTP 상태 코드로의 변환은 api/routes.py 가 담당한다.
"""


class QuizError(Exception):
    """모든 도메인 예외의 기반 클래스."""


class NotFound(QuizError):
    """참조한 시험/응시 기록이 존재하지 않음."""


class TestNotFound(NotFound):
    def __init__(self, test_id: str):
        super().__init__("Test not found")
        self.test_id = test_id


class AttemptNotFound(NotFound):
    def __init__(self, message: str = "No attempt found for this test"):
        super().__init__(message)


class AttemptExpired(QuizError):
    """제한 시간(+유예)을 넘겨 도착한 제출."""

    def __init__(self, overdue_seconds: float):
        super().__init__("Time limit exceeded for this attempt")
        self.overdue_seconds = overdue_seconds


class StoreUnavailable(QuizError):
    """저장소 접근 실패. 응시 기록은 저장되지 않는다."""


class InvalidTransition(QuizError):
    """현재 세션 상태에서 허용되지 않는 조작."""


class QuizApiError(QuizError):
    """클라이언트에서 본 API 호출 실패 (네트워크 오류 또는 4xx/5xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """
    JSON 은 camelCase, 파이썬 속성은 snake_case.
    입력은 두 표기 모두 허용한다.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(BaseModel):
    """
    객관식 문항 모델 (카탈로그 소유, 게시 후 불변)
    correct_option 은 서버 채점 시에만 사용한다.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="문항 식별자"
    )
    text: str = Field(
        ...,
        min_length=1,
        description="문항 본문"
    )
    options: List[str] = Field(
        ...,
        description="보기 리스트 (순서 유지)"
    )
    correct_option: int = Field(
        ...,
        ge=0,
        description="정답 보기 인덱스 (0-based)"
    )
    marks: Optional[int] = Field(
        None,
        ge=0,
        description="배점. 없거나 0이면 1점으로 계산"
    )
    created_at: datetime = Field(
        default_factory=_utcnow,
        description="생성 시각. 문항 목록 정렬 기준"
    )

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """
        검증 로직 1: 보기는 최소 2개 이상이어야 한다.
        """
        if len(v) < 2:
            raise ValueError("보기(options)는 최소 2개 이상의 항목이 필요합니다.")
        return v

    @model_validator(mode='after')
    def validate_correct_option_in_range(self) -> 'Question':
        """
        검증 로직 2: 정답 인덱스는 보기 범위 안에 있어야 한다.
        """
        if self.correct_option >= len(self.options):
            raise ValueError(
                f"정답 인덱스({self.correct_option})가 보기 개수({len(self.options)})를 벗어났습니다."
            )
        return self

    @property
    def effective_marks(self) -> int:
        return self.marks or 1


# ── 투영(projection) ─────────────────────────────────────────────────────────
# 응시 중에는 정답을 빼고, 리뷰 시에는 정답을 포함한다.

class PublicQuestion(CamelModel):
    """응시 중 전달되는 문항. correct_option 필드 자체가 없다."""
    id: str
    text: str
    options: List[str]
    marks: int

    @classmethod
    def from_question(cls, q: Question) -> 'PublicQuestion':
        return cls(id=q.id, text=q.text, options=list(q.options), marks=q.effective_marks)


class ReviewQuestion(PublicQuestion):
    """리뷰 화면용 문항. 정오 표시를 위해 정답을 포함한다."""
    correct_option: int

    @classmethod
    def from_question(cls, q: Question) -> 'ReviewQuestion':
        return cls(
            id=q.id,
            text=q.text,
            options=list(q.options),
            marks=q.effective_marks,
            correct_option=q.correct_option,
        )

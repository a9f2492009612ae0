from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class NotebookCreateRequest(CamelModel):
    # 필수 여부는 라우터에서 검사 (누락 시 422가 아닌 400을 돌려주기 위함)
    title: Optional[str] = None
    description: Optional[str] = Field(default=None, description="선택 설명")


class NotebookUpdateRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class NotebookResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NotebookEnvelope(CamelModel):
    data: NotebookResponse


class NotebookListEnvelope(CamelModel):
    data: List[NotebookResponse]

from datetime import datetime
from typing import List, Optional

from .common import CamelModel


class NoteCreateRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    notebook_id: Optional[str] = None


class NoteUpdateRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    notebook_id: Optional[str] = None


class NoteResponse(CamelModel):
    id: str
    title: str
    content: str
    notebook_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NoteEnvelope(CamelModel):
    data: NoteResponse


class NoteListEnvelope(CamelModel):
    data: List[NoteResponse]

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import ClientInputError, DependencyUnavailableError, NotFoundError
from ..core.utils import clean_text, is_valid_object_id, normalize_object_id
from ..database import get_db, store_operation
from ..models import Note
from ..schemas.common import MessageResponse
from ..schemas.note import (
    NoteCreateRequest,
    NoteUpdateRequest,
    NoteResponse,
    NoteEnvelope,
    NoteListEnvelope,
)
from ..services.notebook_lookup import NotebookLookupClient, NotebookLookupVerdict, get_notebook_lookup

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _require_valid_id(note_id: str) -> str:
    if not is_valid_object_id(note_id):
        raise ClientInputError("Invalid note ID")
    return normalize_object_id(note_id)


def _envelope(note: Note) -> NoteEnvelope:
    return NoteEnvelope(data=NoteResponse.model_validate(note))


def _verify_notebook_reference(lookup: NotebookLookupClient, notebook_id: str) -> None:
    """Raise unless the Notebook exists right now; must run before any write.

    Fail-closed: an indeterminate answer rejects the write just like a missing
    Notebook, only with a server error instead of a client error.
    """
    verdict = lookup.check_exists(notebook_id)
    if verdict is NotebookLookupVerdict.EXISTS:
        return
    if verdict is NotebookLookupVerdict.NOT_FOUND:
        raise ClientInputError("Notebook with the given ID does not exist")
    logger.error(
        "Notebook reference could not be verified",
        extra={"event": "note.reference_unverified", "details": notebook_id},
    )
    raise DependencyUnavailableError()


def _supplied_reference(notebook_id: Optional[str]) -> Optional[str]:
    # null 이나 빈 문자열은 "참조 없음"
    if notebook_id is None:
        return None
    notebook_id = notebook_id.strip()
    if not notebook_id:
        return None
    # 형식이 맞는 ID만 소문자로; 나머지는 그대로 원격에 물어 NOT_FOUND를 받는다
    if is_valid_object_id(notebook_id):
        return normalize_object_id(notebook_id)
    return notebook_id


@router.get("", response_model=NoteListEnvelope)
def list_notes(db: Session = Depends(get_db)):
    with store_operation(db, "fetching notes"):
        notes = db.query(Note).order_by(Note.created_at.asc(), Note.id.asc()).all()
    return NoteListEnvelope(data=[NoteResponse.model_validate(n) for n in notes])


@router.post("", response_model=NoteEnvelope, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteCreateRequest,
    db: Session = Depends(get_db),
    lookup: NotebookLookupClient = Depends(get_notebook_lookup),
):
    title = clean_text(payload.title)
    content = clean_text(payload.content)
    if not title or not content:
        raise ClientInputError("Title and content are required")

    notebook_id = _supplied_reference(payload.notebook_id)
    if notebook_id is not None:
        _verify_notebook_reference(lookup, notebook_id)

    note = Note(title=title, content=content, notebook_id=notebook_id)
    with store_operation(db, "saving note"):
        db.add(note)
        db.commit()
        db.refresh(note)
    return _envelope(note)


@router.get("/{note_id}", response_model=NoteEnvelope)
def get_note(note_id: str, db: Session = Depends(get_db)):
    note_id = _require_valid_id(note_id)

    with store_operation(db, "fetching note"):
        note = db.get(Note, note_id)
    if not note:
        raise NotFoundError("Note not found")
    return _envelope(note)


@router.put("/{note_id}", response_model=NoteEnvelope)
def update_note(
    note_id: str,
    payload: NoteUpdateRequest,
    db: Session = Depends(get_db),
    lookup: NotebookLookupClient = Depends(get_notebook_lookup),
):
    note_id = _require_valid_id(note_id)

    notebook_id = _supplied_reference(payload.notebook_id)
    # 명시적 null(또는 빈 문자열)은 Notebook 연결 해제; 원격 확인 없음
    detach_notebook = "notebook_id" in payload.model_fields_set and notebook_id is None
    if payload.title is None and payload.content is None and notebook_id is None:
        raise ClientInputError("At least one of title, content or notebookId is required to update")

    title = clean_text(payload.title)
    content = clean_text(payload.content)
    if title is not None and len(title) == 0:
        raise ClientInputError("Title cannot be empty")
    if content is not None and len(content) == 0:
        raise ClientInputError("Content cannot be empty")

    # 존재 확인은 항상 로컬 쓰기보다 먼저
    if notebook_id is not None:
        _verify_notebook_reference(lookup, notebook_id)

    with store_operation(db, "updating note"):
        note = db.get(Note, note_id)
        if not note:
            raise NotFoundError("Note not found")

        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        if notebook_id is not None:
            note.notebook_id = notebook_id
        elif detach_notebook:
            note.notebook_id = None
        db.commit()
        db.refresh(note)
    return _envelope(note)


@router.delete("/{note_id}", response_model=MessageResponse)
def delete_note(note_id: str, db: Session = Depends(get_db)):
    note_id = _require_valid_id(note_id)

    with store_operation(db, "deleting note"):
        note = db.get(Note, note_id)
        if not note:
            raise NotFoundError("Note not found")
        db.delete(note)
        db.commit()
    return MessageResponse(message="Note was deleted")

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.errors import ClientInputError, NotFoundError
from ..core.utils import clean_text, is_valid_object_id, normalize_object_id
from ..database import get_db, store_operation
from ..models import Notebook
from ..schemas.common import MessageResponse
from ..schemas.notebook import (
    NotebookCreateRequest,
    NotebookUpdateRequest,
    NotebookResponse,
    NotebookEnvelope,
    NotebookListEnvelope,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notebooks", tags=["notebooks"])


def _require_valid_id(notebook_id: str) -> str:
    if not is_valid_object_id(notebook_id):
        raise ClientInputError("Invalid notebook ID")
    return normalize_object_id(notebook_id)


def _envelope(notebook: Notebook) -> NotebookEnvelope:
    return NotebookEnvelope(data=NotebookResponse.model_validate(notebook))


@router.get("", response_model=NotebookListEnvelope)
def list_notebooks(db: Session = Depends(get_db)):
    with store_operation(db, "getting notebooks from database"):
        notebooks = db.query(Notebook).order_by(Notebook.created_at.asc(), Notebook.id.asc()).all()
    return NotebookListEnvelope(data=[NotebookResponse.model_validate(n) for n in notebooks])


@router.post("", response_model=NotebookEnvelope, status_code=status.HTTP_201_CREATED)
def create_notebook(payload: NotebookCreateRequest, db: Session = Depends(get_db)):
    title = clean_text(payload.title)
    if not title:
        raise ClientInputError("Title is required")

    description = clean_text(payload.description)
    if description is not None and len(description) == 0:
        raise ClientInputError("Description cannot be empty string")

    notebook = Notebook(title=title, description=description)
    with store_operation(db, "saving notebook to database"):
        db.add(notebook)
        db.commit()
        db.refresh(notebook)
    return _envelope(notebook)


@router.get("/{notebook_id}", response_model=NotebookEnvelope)
def get_notebook(notebook_id: str, db: Session = Depends(get_db)):
    notebook_id = _require_valid_id(notebook_id)

    with store_operation(db, "getting notebook from database"):
        notebook = db.get(Notebook, notebook_id)
    if not notebook:
        raise NotFoundError("Notebook not found")
    return _envelope(notebook)


@router.put("/{notebook_id}", response_model=NotebookEnvelope)
def update_notebook(notebook_id: str, payload: NotebookUpdateRequest, db: Session = Depends(get_db)):
    notebook_id = _require_valid_id(notebook_id)

    # 명시적 null은 설명을 비움 (단, 그것만으로는 수정 요청이 아님)
    clear_description = "description" in payload.model_fields_set and payload.description is None
    if payload.title is None and payload.description is None:
        raise ClientInputError("Title or Description is required to update")

    title = clean_text(payload.title)
    description = clean_text(payload.description)
    if title is not None and len(title) == 0:
        raise ClientInputError("Title cannot be empty string")
    if description is not None and len(description) == 0:
        raise ClientInputError("Description cannot be empty string")

    with store_operation(db, "updating notebook in database"):
        notebook = db.get(Notebook, notebook_id)
        if not notebook:
            raise NotFoundError("Notebook not found")

        # 전달된 필드만 덮어씀
        if title is not None:
            notebook.title = title
        if description is not None:
            notebook.description = description
        elif clear_description:
            notebook.description = None
        db.commit()
        db.refresh(notebook)
    return _envelope(notebook)


@router.delete("/{notebook_id}", response_model=MessageResponse)
def delete_notebook(notebook_id: str, db: Session = Depends(get_db)):
    notebook_id = _require_valid_id(notebook_id)

    with store_operation(db, "deleting notebook from database"):
        notebook = db.get(Notebook, notebook_id)
        if not notebook:
            raise NotFoundError("Notebook not found")
        # Note는 다른 서비스 소유: 참조하던 Note는 그대로 남는다
        db.delete(notebook)
        db.commit()
    logger.info("Notebook deleted", extra={"event": "notebook.deleted", "details": notebook_id})
    return MessageResponse(message="Notebook was deleted")

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

from .core.utils import new_object_id, utcnow

Base = declarative_base()


# =========================
# Notebook 서비스 소유
# =========================


class Notebook(Base):
    __tablename__ = "notebooks"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True, default=None)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


# =========================
# Note 서비스 소유
# =========================


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    # 다른 서비스의 저장소를 가리키므로 ForeignKey 없음 (쓰기 시점에만 존재 확인)
    notebook_id = Column(String(24), nullable=True, default=None, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

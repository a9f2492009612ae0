import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .core.errors import DependencyUnavailableError

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
	# sqlite는 스레드풀에서 쓰이므로 check_same_thread 해제, 인메모리는 단일 커넥션 공유
	kwargs = {"echo": echo, "future": True}
	if database_url.startswith("sqlite"):
		kwargs["connect_args"] = {"check_same_thread": False}
		if database_url in ("sqlite://", "sqlite:///:memory:"):
			kwargs["poolclass"] = StaticPool
	return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
	return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db(request: Request) -> Generator[Session, None, None]:
	db = request.app.state.session_factory()
	try:
		yield db
	finally:
		db.close()


@contextmanager
def store_operation(db: Session, action: str) -> Iterator[None]:
	"""Translate store failures into DependencyUnavailableError.

	The session is rolled back and the cause logged; the caller only sees the
	generic server error.
	"""
	try:
		yield
	except SQLAlchemyError:
		db.rollback()
		logger.exception(f"Error {action}", extra={"event": "store.error", "details": action})
		raise DependencyUnavailableError()

"""Remote existence check against the Notebook service.

The Note service has no access to Notebook storage, so a foreign reference is
verified by asking the Notebook service directly. The answer is one of three
verdicts; "does not exist" and "could not determine" are never merged because
the first is a client input error and the second is an availability problem.

No retry and no caching: every call is a live request, so a Notebook deleted
a moment ago is reported as gone.
"""
import enum
import logging
from typing import Optional
from urllib.parse import quote

import httpx
from fastapi import Request

from ..core.config import NoteServiceSettings

logger = logging.getLogger(__name__)


class NotebookLookupVerdict(str, enum.Enum):
    EXISTS = "EXISTS"
    NOT_FOUND = "NOT_FOUND"
    REMOTE_ERROR = "REMOTE_ERROR"


def classify_lookup_status(status_code: int) -> NotebookLookupVerdict:
    if 200 <= status_code < 300:
        return NotebookLookupVerdict.EXISTS
    # 잘못된 형식의 ID(400)도 결국 존재하지 않는 Notebook
    if status_code in (httpx.codes.NOT_FOUND, httpx.codes.BAD_REQUEST):
        return NotebookLookupVerdict.NOT_FOUND
    return NotebookLookupVerdict.REMOTE_ERROR


class NotebookLookupClient:
    DEFAULT_TIMEOUT = 5.0

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _request(self, path: str) -> httpx.Response:
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            return client.get(path)

    def check_exists(self, notebook_id: str) -> NotebookLookupVerdict:
        path = f"/notebooks/{quote(notebook_id, safe='')}"
        try:
            response = self._request(path)
        except httpx.HTTPError as exc:
            # 연결 거부, 타임아웃, 프로토콜 오류 모두 판단 불가
            logger.warning(
                "Error connecting to notebook service",
                extra={"event": "lookup.transport_error", "path": path, "details": repr(exc)},
            )
            return NotebookLookupVerdict.REMOTE_ERROR

        verdict = classify_lookup_status(response.status_code)
        if verdict is NotebookLookupVerdict.REMOTE_ERROR:
            logger.warning(
                "Unexpected response from notebook service",
                extra={"event": "lookup.remote_error", "path": path, "status_code": response.status_code},
            )
        elif verdict is NotebookLookupVerdict.NOT_FOUND:
            logger.info(
                "Notebook reference does not resolve",
                extra={"event": "lookup.not_found", "path": path, "status_code": response.status_code},
            )
        return verdict


def build_lookup_client(settings: NoteServiceSettings) -> NotebookLookupClient:
    return NotebookLookupClient(str(settings.notebook_service_url), timeout=settings.notebook_lookup_timeout)


def get_notebook_lookup(request: Request) -> NotebookLookupClient:
    return request.app.state.notebook_lookup

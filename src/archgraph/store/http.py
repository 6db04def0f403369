"""
REST record store.

Endpoints, relative to the configured API base URL:

    GET    /analyze/{subject}/graph
    GET    /flows?projectName={subject}
    POST   /flows
    PUT    /flows/{id}
    DELETE /flows/{id}

Each call is a single request with no retry; failures surface as
``RecordStoreError`` so the caller can offer an explicit retry.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..core.exceptions import RecordStoreError
from ..core.types import RawGraph
from ..flows.document import FlowDocument
from .base import FlowId, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RestRecordStore(RecordStore):
    """
    Record store backed by the dashboard's HTTP API.

    Args:
        base_url: API root, e.g. ``http://localhost:8080/api``.
        timeout: Per-request timeout in seconds.
        session: Optional pre-configured ``requests.Session``.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *(quote(str(p), safe="") for p in parts)])

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RecordStoreError(f"{method} {url} failed: {e}", url=url) from e
        logger.debug(f"{method} {url} -> {resp.status_code}")
        return resp

    @staticmethod
    def _raise_for_status(resp: requests.Response, url: str) -> None:
        if not resp.ok:
            body = resp.text.strip()[:200]
            raise RecordStoreError(body or f"Request to {url} failed", status=resp.status_code, url=url)

    @staticmethod
    def _json(resp: requests.Response, url: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise RecordStoreError(f"Invalid JSON from {url}", status=resp.status_code, url=url) from e

    def fetch_graph(self, subject_name: str) -> RawGraph:
        url = self._url("analyze", subject_name, "graph")
        resp = self._request("GET", url)
        if resp.status_code in (204, 404):
            # No analysis yet
            return RawGraph()
        self._raise_for_status(resp, url)
        data = self._json(resp, url)
        if data is None:
            return RawGraph()
        try:
            return RawGraph.model_validate(data)
        except ValidationError as e:
            raise RecordStoreError(f"Malformed graph payload from {url}: {e.error_count()} error(s)",
                                   url=url) from e

    def list_flows(self, subject_name: str) -> List[FlowDocument]:
        url = self._url("flows")
        resp = self._request("GET", url, params={"projectName": subject_name})
        self._raise_for_status(resp, url)
        data = self._json(resp, url) or []
        try:
            return [FlowDocument.model_validate(item) for item in data]
        except ValidationError as e:
            raise RecordStoreError(f"Malformed flow list from {url}", url=url) from e

    def save_flow(self, document: FlowDocument) -> FlowDocument:
        if document.id is None:
            url = self._url("flows")
            resp = self._request("POST", url, json=document.to_wire())
        else:
            url = self._url("flows", str(document.id))
            resp = self._request("PUT", url, json=document.to_wire())
        self._raise_for_status(resp, url)

        data = self._json(resp, url) if resp.content else None
        if not isinstance(data, dict):
            if document.id is None:
                raise RecordStoreError("Store did not return the created flow", url=url)
            return document
        try:
            return FlowDocument.model_validate({**document.to_wire(), **data})
        except ValidationError as e:
            raise RecordStoreError(f"Malformed flow payload from {url}", url=url) from e

    def delete_flow(self, flow_id: FlowId) -> None:
        url = self._url("flows", str(flow_id))
        resp = self._request("DELETE", url)
        self._raise_for_status(resp, url)

    def close(self) -> None:
        self._session.close()

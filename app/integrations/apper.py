"""Apper record store integration."""
import logging
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import quote, urljoin

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.config import settings
from app.core.exceptions import TransportError
from app.integrations.stub_store import InMemoryRecordStore, TableSchema
from app.middleware.metrics import record_store_requests_total
from app.schemas.record import FetchResponse, MutationResponse, RecordResponse

logger = logging.getLogger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)


class ApperMode(str, Enum):
    """Record store mode."""

    STUB = "stub"
    LIVE = "live"


def default_stub_store() -> InMemoryRecordStore:
    """Stub store with the task and category table schemas."""
    from app.crud.category import CATEGORY_UPDATEABLE_FIELDS
    from app.crud.task import TASK_UPDATEABLE_FIELDS

    return InMemoryRecordStore(
        schemas={
            settings.TASKS_TABLE: TableSchema(TASK_UPDATEABLE_FIELDS, required=("title",)),
            settings.CATEGORIES_TABLE: TableSchema(CATEGORY_UPDATEABLE_FIELDS, required=("Name",)),
        }
    )


class ApperClient:
    """Record store client with stub and live modes.

    Build one per process and hand it to every repository.
    """

    def __init__(
        self,
        *,
        mode: Optional[str] = None,
        base_url: Optional[str] = None,
        project_id: Optional[str] = None,
        public_key: Optional[str] = None,
        timeout: Optional[float] = None,
        store: Optional[InMemoryRecordStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.mode = ApperMode((mode or settings.APPER_MODE).lower())
        base_url = base_url if base_url is not None else settings.APPER_BASE_URL
        self.base_url = base_url.rstrip("/") if base_url else None
        self.project_id = project_id if project_id is not None else settings.APPER_PROJECT_ID
        self.public_key = public_key if public_key is not None else settings.APPER_PUBLIC_KEY
        self.timeout = timeout if timeout is not None else settings.APPER_TIMEOUT
        self.store = store if store is not None else (default_stub_store() if self.mode == ApperMode.STUB else None)
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    def _build_url(self, table: str, action: str) -> str:
        if not self.base_url:
            raise TransportError("Apper base URL not configured")

        return urljoin(f"{self.base_url}/", f"{quote(table)}/{action}")

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.project_id:
            headers["X-Apper-Project-Id"] = self.project_id
        if self.public_key:
            headers["Authorization"] = f"Bearer {self.public_key}"
        return headers

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                headers=self._build_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _send_live(self, method: str, url: str, payload: Dict[str, Any]) -> Any:
        try:
            response = await self._get_http().request(method, url, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(f"Record store request failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"Record store responded with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError("Record store returned a non-JSON body") from exc

    async def _call(
        self,
        operation: str,
        table: str,
        envelope: Type[EnvelopeT],
        *,
        method: str,
        action: str,
        payload: Dict[str, Any],
        stub_args: tuple,
    ) -> EnvelopeT:
        try:
            if self.mode == ApperMode.STUB:
                raw = getattr(self.store, operation)(table, *stub_args)
            else:
                raw = await self._send_live(method, self._build_url(table, action), payload)
            if raw is None:
                raw = {}
            result = envelope.model_validate(raw)
        except PydanticValidationError as exc:
            record_store_requests_total.labels(table, operation, "error").inc()
            raise TransportError(f"Malformed {operation} response from record store") from exc
        except TransportError:
            record_store_requests_total.labels(table, operation, "error").inc()
            raise
        except ValueError as exc:
            # Stub store rejects queries it cannot evaluate.
            record_store_requests_total.labels(table, operation, "error").inc()
            raise TransportError(str(exc)) from exc

        record_store_requests_total.labels(table, operation, "ok").inc()
        logger.debug(f"{operation} on {table} via {self.mode.value} store")
        return result

    async def fetch_records(self, table: str, params: Dict[str, Any]) -> FetchResponse:
        return await self._call(
            "fetch_records", table, FetchResponse,
            method="POST", action="fetch", payload=params, stub_args=(params,),
        )

    async def get_record_by_id(self, table: str, record_id: Any, params: Dict[str, Any]) -> RecordResponse:
        return await self._call(
            "get_record_by_id", table, RecordResponse,
            method="POST", action=f"get/{quote(str(record_id))}", payload=params,
            stub_args=(record_id, params),
        )

    async def create_record(self, table: str, params: Dict[str, Any]) -> MutationResponse:
        return await self._call(
            "create_record", table, MutationResponse,
            method="POST", action="create", payload=params, stub_args=(params,),
        )

    async def update_record(self, table: str, params: Dict[str, Any]) -> MutationResponse:
        return await self._call(
            "update_record", table, MutationResponse,
            method="PUT", action="update", payload=params, stub_args=(params,),
        )

    async def delete_record(self, table: str, params: Dict[str, Any]) -> MutationResponse:
        return await self._call(
            "delete_record", table, MutationResponse,
            method="DELETE", action="delete", payload=params, stub_args=(params,),
        )

"""Base CRUD operations against a remote record store table."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from app.core.exceptions import FetchError, TransportError, ValidationError
from app.integrations.apper import ApperClient
from app.schemas.common import FetchResult, PagingInfo, RecordFailure, WriteResult
from app.schemas.record import MutationResponse

logger = logging.getLogger(__name__)

RecordInput = Union[Dict[str, Any], Sequence[Dict[str, Any]]]


def as_list(value: Any) -> List[Any]:
    """Accept one item or many."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def filter_updateable(
    record: Dict[str, Any],
    fields: Iterable[str],
    *,
    drop_empty: bool,
) -> Dict[str, Any]:
    """Keep whitelisted fields only.

    Creation drops None and empty strings; updates keep explicit empties so a
    field can be cleared, and drop only keys that were never supplied.
    """
    filtered: Dict[str, Any] = {}
    for field in fields:
        if field not in record:
            continue
        value = record[field]
        if drop_empty and (value is None or value == ""):
            continue
        filtered[field] = value
    return filtered


def record_id_of(record: Dict[str, Any]) -> Any:
    return record.get("Id") or record.get("id")


def split_results(
    response: MutationResponse,
    inputs: List[Dict[str, Any]],
    *,
    entity: str,
    action: str,
) -> WriteResult:
    """Separate per-record successes from failures and log the failures."""
    result = WriteResult()
    for index, item in enumerate(response.results or []):
        if item.success:
            if item.data is not None:
                result.records.append(item.data)
            continue
        result.failures.append(
            RecordFailure(
                index=index,
                record=inputs[index] if index < len(inputs) else {},
                message=item.message or "Record does not exist",
                errors=item.errors or [],
            )
        )

    if result.failures:
        logger.warning(f"Failed to {action} {len(result.failures)} {entity}")
        for failure in result.failures:
            if failure.errors:
                for error in failure.errors:
                    logger.error(f"Field: {error.fieldLabel}, Error: {error.message}")
            else:
                logger.error(f"Error: {failure.message}")
    return result


class CRUDRemoteBase:
    """Fetch/get/create/update/delete/search over one store table.

    Subclasses declare the field lists and ordering, and may override
    ``format_field`` for type-specific wire formatting.
    """

    entity: str = "records"
    fields: Sequence[str] = ()
    updateable_fields: Sequence[str] = ()
    order_by: Sequence[Dict[str, str]] = ()

    def __init__(self, client: ApperClient, table: str, *, page_size: int = 50):
        self.client = client
        self.table = table
        self.page_size = page_size

    def format_field(self, field: str, value: Any) -> Any:
        return value

    def complete_record(self, record: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        """Hook for defaults added after whitelisting."""
        return record

    def prepare_create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        filtered = filter_updateable(record, self.updateable_fields, drop_empty=True)
        formatted = {field: self.format_field(field, value) for field, value in filtered.items()}
        return self.complete_record(formatted, creating=True)

    def prepare_update(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record_id = record_id_of(record)
        if record_id is None or record_id == "":
            raise ValidationError(f"Cannot update {self.entity} without an Id")
        filtered = filter_updateable(record, self.updateable_fields, drop_empty=False)
        formatted = {field: self.format_field(field, value) for field, value in filtered.items()}
        return {"Id": record_id, **self.complete_record(formatted, creating=False)}

    def build_query(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = dict(params or {})
        limit = params.pop("limit", None) or self.page_size
        offset = params.pop("offset", None) or 0
        query: Dict[str, Any] = {
            "fields": list(self.fields),
            "orderBy": [dict(order) for order in self.order_by],
            "pagingInfo": PagingInfo(limit=limit, offset=offset).model_dump(),
        }
        query.update(params)
        return query

    def search_params(self, term: str) -> Dict[str, Any]:
        raise NotImplementedError

    async def fetch(self, params: Optional[Dict[str, Any]] = None) -> FetchResult:
        """Fetch a page of records; an unreachable store is an error, not an empty list."""
        try:
            response = await self.client.fetch_records(self.table, self.build_query(params))
        except TransportError as exc:
            logger.error(f"Error fetching {self.entity}: {exc}")
            raise FetchError(f"Failed to fetch {self.entity}. Please try again.") from exc

        if response.data is None:
            return FetchResult(records=[], total=0)
        return FetchResult(records=response.data, total=response.totalCount or len(response.data))

    async def get_by_id(self, record_id: Any) -> Optional[Dict[str, Any]]:
        try:
            response = await self.client.get_record_by_id(self.table, record_id, {"fields": list(self.fields)})
        except TransportError as exc:
            logger.error(f"Error fetching {self.entity} with ID {record_id}: {exc}")
            raise FetchError(f"Failed to fetch {self.entity} details. Please try again.") from exc
        return response.data

    async def create(self, records: RecordInput) -> WriteResult:
        """Create one or many records; returns the created subset and the failures."""
        inputs = [self.prepare_create(record) for record in as_list(records)]
        try:
            response = await self.client.create_record(self.table, {"records": inputs})
        except TransportError as exc:
            logger.error(f"Error creating {self.entity}: {exc}")
            raise FetchError(
                f"Failed to create {self.entity}. Please check your data and try again."
            ) from exc

        if not (response.success and response.results is not None):
            logger.error(f"Error creating {self.entity}: {response.message or 'request rejected'}")
            raise FetchError(f"Failed to create {self.entity}. Please check your data and try again.")
        return split_results(response, inputs, entity=self.entity, action="create")

    async def update(self, records: RecordInput) -> WriteResult:
        """Update one or many records by Id; partial failures as in ``create``."""
        inputs = [self.prepare_update(record) for record in as_list(records)]
        try:
            response = await self.client.update_record(self.table, {"records": inputs})
        except TransportError as exc:
            logger.error(f"Error updating {self.entity}: {exc}")
            raise FetchError(
                f"Failed to update {self.entity}. Please check your data and try again."
            ) from exc

        if not (response.success and response.results is not None):
            logger.error(f"Error updating {self.entity}: {response.message or 'request rejected'}")
            raise FetchError(f"Failed to update {self.entity}. Please check your data and try again.")
        return split_results(response, inputs, entity=self.entity, action="update")

    async def delete(self, record_ids: Any) -> bool:
        """Delete by Id.

        True whenever the store accepted the call; record-level failures
        (for example unknown ids) are only logged.
        """
        ids = as_list(record_ids)
        try:
            response = await self.client.delete_record(self.table, {"RecordIds": ids})
        except TransportError as exc:
            logger.error(f"Error deleting {self.entity}: {exc}")
            raise FetchError(f"Failed to delete {self.entity}. Please try again.") from exc

        if not (response.success and response.results is not None):
            logger.error(f"Error deleting {self.entity}: {response.message or 'request rejected'}")
            raise FetchError(f"Failed to delete {self.entity}. Please try again.")

        split_results(response, [{"Id": record_id} for record_id in ids], entity=self.entity, action="delete")
        return True

    async def search(self, term: str, extra_filters: Optional[Dict[str, Any]] = None) -> FetchResult:
        params = {**self.search_params(term), **(extra_filters or {})}
        try:
            return await self.fetch(params)
        except FetchError as exc:
            raise FetchError(f"Failed to search {self.entity}. Please try again.") from exc

"""
Thin async client for the Airtable REST API.

Only the two calls this service needs: batched record creation and a paged
list that drains every page before returning.
"""
from typing import Iterable, List, Optional

import httpx

from config import TABLE_NAME
from log import get_logger
from models import ListOptions, OutgoingRecord, StoreRecord

logger = get_logger(__name__)

# Airtable limits
CREATE_BATCH_SIZE = 10
MAX_PAGE_SIZE = 100


class StoreError(Exception):
    """Raised when Airtable answers with a non-2xx status."""

    def __init__(self, status_code: int, error_type: str, message: str):
        self.status_code = status_code
        self.error_type = error_type
        self.message = message
        super().__init__(f"{error_type}: {message}" if message else error_type)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "StoreError":
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return cls(response.status_code, error.get("type", "UNKNOWN_ERROR"), error.get("message", ""))
        if isinstance(error, str):
            return cls(response.status_code, error, "")
        return cls(response.status_code, f"HTTP_{response.status_code}", response.text)


class AirtableStore:
    def __init__(
        self,
        api_key: str,
        base_id: str,
        table_name: str = TABLE_NAME,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_id = base_id
        self.table_name = table_name
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._url = f"{api_url.rstrip('/')}/{base_id}/{table_name}"

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def create(self, records: Iterable[OutgoingRecord]) -> List[StoreRecord]:
        records = list(records)
        created: List[StoreRecord] = []
        for start in range(0, len(records), CREATE_BATCH_SIZE):
            batch = records[start:start + CREATE_BATCH_SIZE]
            body = {"records": [{"fields": record.to_fields()} for record in batch]}
            response = await self._client.post(self._url, json=body, headers=self._headers)
            if response.is_error:
                error = StoreError.from_response(response)
                logger.error("airtable_create_failed", table=self.table_name, error=str(error))
                raise error
            created.extend(_parse_record(item) for item in response.json().get("records", []))

        logger.info("airtable_records_created", table=self.table_name, count=len(created))
        for record in created:
            logger.info("airtable_record_created", record_id=record.id)
        return created

    async def list(self, options: Optional[ListOptions] = None) -> List[StoreRecord]:
        options = options or ListOptions()
        params = _list_params(options)
        results: List[StoreRecord] = []

        while True:
            response = await self._client.get(self._url, params=params, headers=self._headers)
            if response.is_error:
                error = StoreError.from_response(response)
                logger.error("airtable_list_failed", table=self.table_name, error=str(error))
                raise error
            body = response.json()
            for item in body.get("records", []):
                record = _parse_record(item)
                logger.debug("airtable_record_retrieved", record_id=record.id, name=record.fields.get("Name"))
                results.append(record)

            offset = body.get("offset")
            if not offset or len(results) >= options.max_records:
                break
            params["offset"] = offset

        results = results[:options.max_records]
        logger.info("airtable_records_retrieved", table=self.table_name, count=len(results))
        return results


def _list_params(options: ListOptions) -> dict:
    params = {
        "maxRecords": options.max_records,
        "pageSize": max(1, min(options.max_records, MAX_PAGE_SIZE)),
    }
    if options.view:
        params["view"] = options.view
    if options.filter_by_formula:
        params["filterByFormula"] = options.filter_by_formula
    for i, sort in enumerate(options.sort):
        params[f"sort[{i}][field]"] = sort.field
        params[f"sort[{i}][direction]"] = sort.direction
    return params


def _parse_record(item: dict) -> StoreRecord:
    return StoreRecord(
        id=item["id"],
        fields=item.get("fields") or {},
        created_time=item.get("createdTime"),
    )

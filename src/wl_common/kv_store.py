"""KeyValueStore Protocol and typed record helpers.

The store offers single-key get/put/delete plus a paginated prefix scan.
There is no multi-key atomicity and no compare-and-swap: every ledger
operation is a short sequence of independent calls, last write wins.

Unit tests inject an in-memory store conforming to this Protocol; the
redis-backed implementation lives in src.wl_common.redis_client.
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

import pydantic

from src.wl_common.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=pydantic.BaseModel)

# Page size used when a caller walks a whole prefix (full scans)
SCAN_BATCH = 1000


@dataclass
class KeyPage:
    keys: list[str] = field(default_factory=list)
    cursor: str | None = None
    list_complete: bool = True


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def list_keys(
        self, prefix: str, limit: int, cursor: str | None = None
    ) -> KeyPage: ...


async def read_record_or_none(
    store: KeyValueStore, key: str, model: type[RecordT]
) -> RecordT | None:
    raw = await store.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate_json(raw)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Corrupt record under {key}") from exc


async def read_record(store: KeyValueStore, key: str, model: type[RecordT]) -> RecordT:
    """Load and decode one record. Raises NotFoundError if the key is absent."""
    record = await read_record_or_none(store, key, model)
    if record is None:
        raise NotFoundError()
    return record


async def write_record(store: KeyValueStore, key: str, record: pydantic.BaseModel) -> None:
    await store.put(key, record.model_dump_json(by_alias=True))


async def read_page(
    store: KeyValueStore,
    prefix: str,
    model: type[RecordT],
    limit: int,
    cursor: str | None = None,
) -> tuple[list[RecordT], KeyPage]:
    """Read one page of records under `prefix`.

    Keys that vanished between scan and read, or whose payload fails to
    decode, are skipped, so a page may hold fewer than `limit` records.
    """
    page = await store.list_keys(prefix, limit, cursor)
    records: list[RecordT] = []
    for key in page.keys:
        try:
            records.append(await read_record(store, key, model))
        except (NotFoundError, ValidationError):
            logger.debug("Skipping unreadable record: key=%s", key)
    return records, page


async def iter_records(
    store: KeyValueStore, prefix: str, model: type[RecordT]
) -> AsyncIterator[RecordT]:
    """Walk every page under `prefix`, yielding each decodable record."""
    cursor: str | None = None
    while True:
        records, page = await read_page(store, prefix, model, SCAN_BATCH, cursor)
        for record in records:
            yield record
        if page.list_complete or page.cursor is None:
            return
        cursor = page.cursor

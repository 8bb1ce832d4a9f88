"""
Best-effort introspection of the Airtable table.

The REST records endpoint exposes no schema, so the snapshot is a static
field list widened by whatever a few sampled rows contain. Probing is
advisory: failures fall back to the static list and are never raised.
"""
from typing import List, Sequence

from config import TABLE_NAME
from log import get_logger
from models import FieldSpec, ListOptions, OutgoingRecord, SchemaSnapshot
from transform import ALLOWED_STATUSES

logger = get_logger(__name__)

SAMPLE_SIZE = 3
STATUS_FIELD = "Status"


def static_schema(table_name: str = TABLE_NAME) -> SchemaSnapshot:
    return SchemaSnapshot(
        table_name=table_name,
        fields=[
            FieldSpec(name="Name", type="singleLineText"),
            FieldSpec(name="Notes", type="multilineText"),
            FieldSpec(name=STATUS_FIELD, type="singleSelect", choices=list(ALLOWED_STATUSES)),
        ],
    )


async def probe_schema(store) -> SchemaSnapshot:
    snapshot = static_schema(store.table_name)
    try:
        samples = await store.list(ListOptions(max_records=SAMPLE_SIZE))
    except Exception as exc:
        logger.warning("schema_probe_failed", table=store.table_name, error=str(exc))
        return snapshot

    status = snapshot.field(STATUS_FIELD)
    for record in samples:
        for name, value in record.fields.items():
            if snapshot.field(name) is None:
                snapshot.fields.append(FieldSpec(name=name, type="unknown"))
            if name == STATUS_FIELD and isinstance(value, str) and value and value not in status.choices:
                status.choices.append(value)

    snapshot.probed = True
    snapshot.sample_count = len(samples)
    logger.info(
        "schema_probed",
        table=store.table_name,
        samples=len(samples),
        fields=[spec.name for spec in snapshot.fields],
    )
    return snapshot


def allowed_statuses(snapshot: SchemaSnapshot) -> List[str]:
    status = snapshot.field(STATUS_FIELD)
    return list(status.choices) if status else []


def sanitize_status(status, allowed: Sequence[str]):
    if not allowed or status in allowed:
        return status
    return allowed[0]


def sanitize_record(record: OutgoingRecord, snapshot: SchemaSnapshot) -> OutgoingRecord:
    status = sanitize_status(record.status, allowed_statuses(snapshot))
    if status != record.status:
        logger.info("status_sanitized", original=record.status, status=status)
    return OutgoingRecord(name=record.name, notes=record.notes, status=status)

import json
import traceback
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import get_settings
from log import configure_logging, get_logger
from models import ListOptions, OutgoingRecord
from schema import probe_schema, sanitize_record
from store import AirtableStore
from transform import transform_webhook

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    app.state.store = AirtableStore(
        api_key=settings.AIRTABLE_API_KEY,
        base_id=settings.AIRTABLE_BASE_ID,
        api_url=settings.AIRTABLE_API_URL,
        timeout=settings.AIRTABLE_TIMEOUT,
    )
    base_url = f"http://localhost:{settings.PORT}"
    logger.info(
        "service_started",
        port=settings.PORT,
        webhook=f"{base_url}/webhook",
        test_read=f"{base_url}/test-read",
        test_write=f"{base_url}/test-write",
    )
    yield
    await app.state.store.aclose()


app = FastAPI(title="Planning Center to Airtable", lifespan=lifespan)


def get_store(request: Request) -> AirtableStore:
    return request.app.state.store


def _error(message: str, exc: Exception, status_code: int = 500, **extra) -> JSONResponse:
    return JSONResponse({"message": message, "error": str(exc), **extra}, status_code=status_code)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Planning Center to Airtable webhook service is running!"


@app.post("/webhook")
async def receive_webhook(request: Request, store: AirtableStore = Depends(get_store)):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    logger.info("webhook_received", payload=payload)

    if not isinstance(payload, dict) or not payload.get("data"):
        logger.warning("webhook_missing_data")
        raise HTTPException(400, "No data received")

    try:
        record = transform_webhook(payload)
        snapshot = await probe_schema(store)
        record = sanitize_record(record, snapshot)
        logger.info("sending_record", fields=record.to_fields())
        created = await store.create([record])
    except Exception as exc:
        logger.exception("webhook_processing_failed", error=str(exc))
        return _error("Error processing webhook", exc)

    return {
        "message": "Successfully processed webhook and added to Airtable",
        "recordId": created[0].id,
    }


@app.get("/test-read")
async def test_read(
    max_records: int = Query(10, ge=1, le=1000),
    store: AirtableStore = Depends(get_store),
):
    try:
        records = await store.list(ListOptions(max_records=max_records, view="Grid view"))
    except Exception as exc:
        logger.exception("test_read_failed", error=str(exc))
        return _error("Error reading from Airtable", exc)

    return {
        "message": "Successfully read records from Airtable",
        "recordCount": len(records),
        "records": [record.summary() for record in records],
    }


@app.api_route("/test-write", methods=["GET", "POST"])
async def test_write(store: AirtableStore = Depends(get_store)):
    record = OutgoingRecord(
        name="Test User",
        notes="This is a test record created via API",
        status="TEST",
    )
    try:
        record = sanitize_record(record, await probe_schema(store))
        created = await store.create([record])
    except Exception as exc:
        logger.exception("test_write_failed", error=str(exc))
        extra = {"stack": traceback.format_exc()} if get_settings().DEBUG else {}
        return _error("Error writing to Airtable", exc, **extra)

    return {
        "message": "Successfully created test record in Airtable",
        "records": [record.summary() for record in created],
    }


@app.get("/inspect-schema")
async def inspect_schema(store: AirtableStore = Depends(get_store)):
    try:
        snapshot = await probe_schema(store)
    except Exception as exc:
        logger.exception("inspect_schema_failed", error=str(exc))
        return _error("Error inspecting Airtable schema", exc)

    return {"message": "Airtable schema snapshot", "schema": snapshot.model_dump()}


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

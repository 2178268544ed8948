"""Transform history store.

Short-lived log of recent transforms in MongoDB. Records older than the
retention window are pruned on every access.
"""

from datetime import UTC, datetime, timedelta

from bunlint.db.mongo import get_database
from bunlint.models import (
    HISTORY_RETENTION_MINUTES,
    CreateHistoryRequest,
    HistoryRecord,
    PunctuationMode,
)

from .style_catalog import normalize_writing_style

COLLECTION_NAME = "transform_history"


class HistoryQueryError(Exception):
    """Raised when history cannot be read or written."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def _to_history_record(doc: dict) -> HistoryRecord:
    """Convert MongoDB document to HistoryRecord model."""
    writing_style = normalize_writing_style(doc.get("writingStyle"))
    if writing_style is None:
        raise HistoryQueryError(f"未対応の語尾スタイル値を検出しました: {doc.get('writingStyle')}")

    try:
        punctuation_mode = PunctuationMode(doc.get("punctuationMode"))
    except ValueError as e:
        raise HistoryQueryError(
            f"未対応の句読点スタイル値を検出しました: {doc.get('punctuationMode')}"
        ) from e

    created_at = doc["createdAt"]
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)

    return HistoryRecord(
        id=str(doc["_id"]),
        inputText=doc.get("inputText", ""),
        outputText=doc.get("outputText") or "",
        writingStyle=writing_style,
        punctuationMode=punctuation_mode,
        createdAt=created_at,
    )


async def prune_expired_history(now: datetime | None = None) -> int:
    """Delete records older than the retention window; returns the count."""
    db = await get_database()
    collection = db[COLLECTION_NAME]

    cutoff = (now or datetime.now(UTC)) - timedelta(minutes=HISTORY_RETENTION_MINUTES)
    result = await collection.delete_many({"createdAt": {"$lt": cutoff}})
    return result.deleted_count


async def list_recent_history(limit: int = 10) -> list[HistoryRecord]:
    """List the newest records first, at most ``limit`` of them."""
    if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
        raise HistoryQueryError("履歴の取得件数は正の整数で指定してください。")

    await prune_expired_history()

    db = await get_database()
    collection = db[COLLECTION_NAME]

    cursor = collection.find().sort("createdAt", -1).limit(limit)
    docs = await cursor.to_list(length=limit)

    return [_to_history_record(doc) for doc in docs]


async def create_history_record(request: CreateHistoryRequest) -> HistoryRecord:
    """Store a transform in the history collection."""
    await prune_expired_history()

    db = await get_database()
    collection = db[COLLECTION_NAME]

    doc = {
        "inputText": request.inputText,
        "outputText": request.outputText,
        "writingStyle": request.writingStyle.value,
        "punctuationMode": request.punctuationMode.value,
        "createdAt": datetime.now(UTC),
    }

    result = await collection.insert_one(doc)
    doc["_id"] = result.inserted_id

    return _to_history_record(doc)

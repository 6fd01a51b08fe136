"""Session history API endpoints."""

from fastapi import APIRouter

from api.routes.session import record_response, summary_response
from api.schemas import HistoryResponse
from api.session import get_session_store
from trainer.session import SessionRecord
from trainer.stats.summary import summarize_checks

router = APIRouter()


@router.get("")
async def get_history() -> HistoryResponse:
    """List completed sessions with a summary across all of them."""
    store = await get_session_store()
    records = [SessionRecord.from_dict(data) for data in await store.get_history()]
    all_checks = [check for record in records for check in record.count_checks]
    return HistoryResponse(
        sessions=[record_response(r) for r in records],
        overall=summary_response(summarize_checks(all_checks)),
    )


@router.delete("")
async def clear_history() -> dict[str, str]:
    """Remove every completed session."""
    store = await get_session_store()
    await store.clear_history()
    return {"status": "cleared"}

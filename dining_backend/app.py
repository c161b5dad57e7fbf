from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .ledger.config import DEFAULT_LEDGER_CONFIG
from .ledger.errors import InvalidInputError, LedgerStorageError
from .ledger.hearts import (
    list_daily_hearts,
    list_historical_hearts,
    record_heart,
    remove_heart,
)
from .ledger.models import (
    DailyHeartsResponse,
    HeartResult,
    HistoricalHearts,
    LedgerKind,
    MenuItemHeartRequest,
    RemovalResult,
    RolloverResponse,
    SubjectKind,
    VenueHeartRequest,
)
from .ledger.store import LedgerStore
from .recommendations.models import RecommendationResponse
from .recommendations.retrieval import get_recommendations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = LedgerStore(DEFAULT_LEDGER_CONFIG).open()
    app.state.ledger = store
    try:
        yield
    finally:
        store.close()


app = FastAPI(title="Dining Hearts Recommendation API", version="1.0.0", lifespan=lifespan)


def get_ledger(request: Request) -> LedgerStore:
    return request.app.state.ledger


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"success": False, "error": str(exc)})


@app.exception_handler(LedgerStorageError)
async def storage_error_handler(request: Request, exc: LedgerStorageError) -> JSONResponse:
    logger.warning("Ledger storage unavailable: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"success": False, "error": "Ledger storage unavailable, retry later"},
        headers={"Retry-After": "1"},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Hearts ───────────────────────────────────────────────────────────────


@app.post("/hearts/venue", response_model=HeartResult)
def heart_venue(
    body: VenueHeartRequest,
    store: LedgerStore = Depends(get_ledger),
) -> HeartResult:
    return record_heart(store, body.user_id, SubjectKind.venue, body.venue_id, body.action)


@app.post("/hearts/menu-item", response_model=HeartResult)
def heart_menu_item(
    body: MenuItemHeartRequest,
    store: LedgerStore = Depends(get_ledger),
) -> HeartResult:
    return record_heart(
        store,
        body.user_id,
        SubjectKind.menu_item,
        body.menu_item_id,
        body.action,
        context_venue_id=body.venue_id,
    )


@app.get("/hearts/{user_id}", response_model=DailyHeartsResponse)
def daily_hearts(user_id: str, store: LedgerStore = Depends(get_ledger)) -> DailyHeartsResponse:
    hearts = list_daily_hearts(store, user_id)
    return DailyHeartsResponse(
        venue_ids=sorted(hearts.venue_ids),
        menu_item_ids=sorted(hearts.menu_item_ids),
    )


@app.get("/hearts/{user_id}/history", response_model=HistoricalHearts)
def historical_hearts(user_id: str, store: LedgerStore = Depends(get_ledger)) -> HistoricalHearts:
    return list_historical_hearts(store, user_id)


@app.delete("/hearts/{ledger}/{user_id}/{kind}/{subject_id}", response_model=RemovalResult)
def delete_heart(
    ledger: LedgerKind,
    user_id: str,
    kind: SubjectKind,
    subject_id: str,
    store: LedgerStore = Depends(get_ledger),
) -> RemovalResult:
    # Path segments are strings; remove_heart matches numeric ids by value.
    return remove_heart(store, ledger, user_id, kind, subject_id)


# ── Recommendations ──────────────────────────────────────────────────────


@app.get("/recommendations/{user_id}", response_model=RecommendationResponse)
def recommendations(
    user_id: str,
    day: int = Query(..., ge=0, le=6, description="0 = Sunday"),
    time: str = Query(..., pattern=r"^\d{1,2}:\d{2}$", description="HH:MM"),
    store: LedgerStore = Depends(get_ledger),
) -> RecommendationResponse:
    recs = get_recommendations(store, user_id, day, time)
    return RecommendationResponse(recommendations=recs)


# ── Maintenance ──────────────────────────────────────────────────────────


@app.post("/ledger/rollover", response_model=RolloverResponse)
def rollover(store: LedgerStore = Depends(get_ledger)) -> RolloverResponse:
    return RolloverResponse(rolled_over=store.rollover())

from __future__ import annotations

import logging
import time

from ..ledger.errors import InvalidInputError
from ..ledger.hearts import validate_user_id
from ..ledger.models import SubjectKind
from ..ledger.store import LedgerStore
from .config import DEFAULT_RECOMMENDER_CONFIG, RecommenderConfig
from .fusion import fuse
from .geometry import time_to_minutes
from .knn import estimate
from .models import Recommendation
from .selector import select_top

logger = logging.getLogger(__name__)


def _target_vector(day_of_week: int, time_of_day: str) -> tuple[int, int]:
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
        raise InvalidInputError(f"day_of_week must be an integer 0-6, got {day_of_week!r}")
    try:
        return day_of_week, time_to_minutes(time_of_day)
    except ValueError as exc:
        raise InvalidInputError(str(exc)) from exc


def get_recommendations(
    store: LedgerStore,
    user_id: str,
    day_of_week: int,
    time_of_day: str,
    count: int | None = None,
    config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
) -> list[Recommendation]:
    """
    Recommend venues for *user_id* at the given weekly time.

    Training data is the user's archived hearts followed by today's. Returns
    an empty list when the user has no hearts at all.
    """
    start_time = time.time()

    user_id = validate_user_id(user_id)
    target = _target_vector(day_of_week, time_of_day)
    count = config.top_count if count is None else count

    daily, archive = store.snapshot()
    venue_hearts = (
        archive.for_user(user_id, SubjectKind.venue)
        + daily.for_user(user_id, SubjectKind.venue)
    )
    menu_item_hearts = (
        archive.for_user(user_id, SubjectKind.menu_item)
        + daily.for_user(user_id, SubjectKind.menu_item)
    )

    if not venue_hearts and not menu_item_hearts:
        logger.debug("User %s has no hearts, nothing to recommend", user_id)
        return []

    venue_probs = estimate(target, venue_hearts, config.venue_k, epsilon=config.epsilon)
    menu_item_probs = estimate(
        target, menu_item_hearts, config.menu_item_k, epsilon=config.epsilon
    )
    combined = fuse(
        venue_probs,
        menu_item_probs,
        alpha=config.venue_weight,
        beta=config.menu_item_weight,
    )
    recommendations = select_top(combined, count)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.debug(
        "Recommended %d venues for user %s from %d venue / %d menu-item hearts in %sms",
        len(recommendations), user_id, len(venue_hearts), len(menu_item_hearts), elapsed_ms,
    )
    return recommendations

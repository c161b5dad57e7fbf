from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping

from .config import DEFAULT_RECOMMENDER_CONFIG

logger = logging.getLogger(__name__)


def fuse(
    venue_probs: Mapping[Hashable, float],
    menu_item_probs: Mapping[Hashable, float],
    alpha: float = DEFAULT_RECOMMENDER_CONFIG.venue_weight,
    beta: float = DEFAULT_RECOMMENDER_CONFIG.menu_item_weight,
) -> dict[Hashable, float]:
    """Blend two venue distributions linearly and renormalise."""
    combined: dict[Hashable, float] = {}
    for label, prob in venue_probs.items():
        combined[label] = combined.get(label, 0.0) + alpha * prob
    for label, prob in menu_item_probs.items():
        combined[label] = combined.get(label, 0.0) + beta * prob

    total = sum(combined.values())
    if total <= 0:
        return {}
    combined = {label: score / total for label, score in combined.items()}

    logger.debug(
        "Fused %d venue and %d menu-item labels into %d",
        len(venue_probs), len(menu_item_probs), len(combined),
    )
    return combined

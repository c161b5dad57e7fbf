from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence

import numpy as np

from ..ledger.models import HeartEvent
from .config import DEFAULT_RECOMMENDER_CONFIG
from .geometry import distances, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)


def estimate(
    target: tuple[int, int],
    events: Sequence[HeartEvent],
    k: int,
    label_key: str = "venue_id",
    epsilon: float = DEFAULT_RECOMMENDER_CONFIG.epsilon,
) -> dict[Hashable, float]:
    """
    Inverse-distance-weighted vote among the *k* hearts closest to *target*.

    *target* is ``(day_of_week, minutes_since_midnight)``. Each neighbour
    votes for ``getattr(event, label_key)`` with weight
    ``1 / (distance + epsilon)``. Returns label -> probability, summing to 1,
    or an empty dict when there is nothing to vote with.
    """
    if k < 1:
        raise ValueError(f"k must be a positive integer, got {k}")

    voters = [e for e in events if getattr(e, label_key) is not None]
    if not voters:
        return {}

    days = np.array([e.day_of_week for e in voters])
    minutes = np.array([time_to_minutes(e.time_of_day) for e in voters])
    dist = distances(target, days, minutes)

    # Stable sort keeps input order among equidistant hearts.
    nearest = np.argsort(dist, kind="stable")[: min(k, len(voters))]
    weights = 1.0 / (dist[nearest] + epsilon)

    votes: dict[Hashable, float] = {}
    for idx, weight in zip(nearest, weights):
        label = getattr(voters[idx], label_key)
        votes[label] = votes.get(label, 0.0) + float(weight)
        logger.debug(
            "Neighbour %s: distance=%.2f at day %d %s",
            label, dist[idx], days[idx], minutes_to_time(int(minutes[idx])),
        )

    total = sum(votes.values())
    if total <= 0:
        return {}

    return {label: weight / total for label, weight in votes.items()}

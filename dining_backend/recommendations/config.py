from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RecommenderConfig:
    venue_k: int = 5
    # Menu items outnumber venues, so a wider neighbourhood smooths noise.
    menu_item_k: int = 8
    venue_weight: float = 2.0
    menu_item_weight: float = 1.0
    epsilon: float = 0.1
    top_count: int = 3


DEFAULT_RECOMMENDER_CONFIG = RecommenderConfig()

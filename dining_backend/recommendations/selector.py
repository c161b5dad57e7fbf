from __future__ import annotations

from collections.abc import Hashable, Mapping

import pandas as pd

from .models import Recommendation


def _reason(probability: float) -> str:
    return f"{probability * 100:.1f}% match based on your time preferences"


def select_top(probabilities: Mapping[Hashable, float], count: int) -> list[Recommendation]:
    """
    Rank labels by probability (highest first, ties by ascending label) and
    return at most *count* of them. Never pads a short result.
    """
    if not probabilities or count < 1:
        return []

    ranked = pd.DataFrame(
        {
            "label": pd.Series(list(probabilities.keys()), dtype=object),
            "probability": pd.Series(list(probabilities.values()), dtype=float),
        }
    ).sort_values(
        by=["probability", "label"],
        ascending=[False, True],
        kind="mergesort",
    )

    return [
        Recommendation(
            venue_id=row.label,
            confidence=float(row.probability),
            reason=_reason(row.probability),
        )
        for row in ranked.head(count).itertuples(index=False)
    ]

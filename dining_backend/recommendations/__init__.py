"""
Time-aware recommendation engine.

Responsibilities:
- Measure circular distance between (day-of-week, time-of-day) points.
- Estimate a venue distribution from a user's hearts with weighted k-NN.
- Fuse the venue-level and menu-item-level estimates.
- Select the top venues as ranked, explained recommendations.
"""

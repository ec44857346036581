"""
Trust score - pure reputation formula.
Always a full recomputation from the stored counters, never an incremental nudge,
so any user's score can be re-derived and audited from their row.
"""

import math

RATING_WEIGHT = 70
ACTIVITY_WEIGHT = 30
ACTIVITY_CAP = 20
MAX_RATING = 5


def average_rating(rating_sum: int, rating_count: int) -> float:
    """Mean star rating in [0, 5]; 0 when the user has never been rated."""
    if rating_count <= 0:
        return 0.0
    return rating_sum / rating_count


def trust_score(rating_sum: int, rating_count: int, items_shared: int, items_received: int) -> int:
    """
    Score in [0, 100]: up to 70 points from the average rating and up to 30
    from swap activity, which saturates at 20 completed hand-overs.

    >>> trust_score(5, 1, 0, 0)
    70
    >>> trust_score(8, 2, 10, 10)
    86
    """
    rating_part = average_rating(rating_sum, rating_count) / MAX_RATING * RATING_WEIGHT
    swap_count = items_shared + items_received
    activity_part = min(swap_count, ACTIVITY_CAP) / ACTIVITY_CAP * ACTIVITY_WEIGHT
    # Round half up (70.5 -> 71)
    return math.floor(rating_part + activity_part + 0.5)

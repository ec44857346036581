"""
Prometheus metrics for the swap ledger (scraped from /metrics).
"""

from prometheus_client import Counter

SWAP_TRANSITIONS = Counter(
    "foodswap_swap_transitions_total",
    "Swap status transitions applied",
    ["to_status"],
)

CLAIM_CONFLICTS = Counter(
    "foodswap_claim_conflicts_total",
    "Swap requests rejected because the listing was taken or expired",
    ["item"],
)

REVIEWS_SUBMITTED = Counter(
    "foodswap_reviews_submitted_total",
    "Ratings recorded on completed swaps",
    ["review_for"],
)

ITEMS_EXPIRED = Counter(
    "foodswap_items_expired_total",
    "Listings demoted to expired by the sweeper",
)

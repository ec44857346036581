"""
Swap state machine as data: current status -> {next status: who may trigger it}.
"""

import enum

from app.db.models.swap import Swap, SwapStatus


class Actor(str, enum.Enum):
    PROVIDER = "provider"
    REQUESTER = "requester"
    EITHER = "either"


TRANSITIONS: dict[SwapStatus, dict[SwapStatus, Actor]] = {
    SwapStatus.PENDING: {
        SwapStatus.ACCEPTED: Actor.PROVIDER,
        SwapStatus.REJECTED: Actor.PROVIDER,
        SwapStatus.CANCELLED: Actor.EITHER,
    },
    SwapStatus.ACCEPTED: {
        SwapStatus.COMPLETED: Actor.REQUESTER,
        SwapStatus.CANCELLED: Actor.EITHER,
    },
    SwapStatus.REJECTED: {},
    SwapStatus.COMPLETED: {},
    SwapStatus.CANCELLED: {},
}

TERMINAL = frozenset(status for status, edges in TRANSITIONS.items() if not edges)
ACTIVE = frozenset({SwapStatus.PENDING, SwapStatus.ACCEPTED})
# Item statuses are released back to available on these outcomes
RELEASING = frozenset({SwapStatus.REJECTED, SwapStatus.CANCELLED})


def is_allowed(current: SwapStatus, new: SwapStatus) -> bool:
    return new in TRANSITIONS[current]


def required_actor(current: SwapStatus, new: SwapStatus) -> Actor:
    return TRANSITIONS[current][new]


def actor_may(swap: Swap, user_id: int, actor: Actor) -> bool:
    if actor is Actor.PROVIDER:
        return user_id == swap.provider_id
    if actor is Actor.REQUESTER:
        return user_id == swap.requester_id
    return swap.is_participant(user_id)

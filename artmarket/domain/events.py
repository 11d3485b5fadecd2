"""Game events, published only after the state change they describe committed."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Mapping

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]
Listener = Callable[[Payload], Awaitable[None]]

GAME_STARTED = "game.started"
AUCTION_OPENED = "auction.opened"
BID_ACCEPTED = "auction.bid.accepted"
AUCTION_SETTLED = "auction.settled"
AUCTION_TIED = "auction.tied"
AUCTION_CANCELLED = "auction.cancelled"
ROUND_COMPLETED = "round.completed"
GAME_FINISHED = "game.finished"

GAME_EVENTS = frozenset(
    {
        GAME_STARTED,
        AUCTION_OPENED,
        BID_ACCEPTED,
        AUCTION_SETTLED,
        AUCTION_TIED,
        AUCTION_CANCELLED,
        ROUND_COMPLETED,
        GAME_FINISHED,
    }
)

# Subscribe with this name to receive every event; the payload then carries
# the event name under "event".
ANY_EVENT = "*"


class EventBus:
    """Async fan-out of game events to listeners, in subscription order.

    Listener errors propagate to the publisher; the game state is already
    committed by then.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        if event_name != ANY_EVENT and event_name not in GAME_EVENTS:
            raise ValueError(f"Unknown event '{event_name}'")
        self._listeners[event_name].append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    async def publish(self, event_name: str, payload: Payload) -> None:
        logger.debug("Publishing %s for game %s", event_name, payload.get("game_id"))
        for listener in list(self._listeners.get(event_name, ())):
            await listener(payload)
        wildcard = self._listeners.get(ANY_EVENT, ())
        if wildcard:
            tagged = {"event": event_name, **payload}
            for listener in list(wildcard):
                await listener(tagged)

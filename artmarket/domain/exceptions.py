"""Exceptions raised by ArtMarket domain services."""

from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    NOT_POSITIVE = "not_positive"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TOO_LOW = "too_low"
    ALREADY_HIGHEST = "already_highest"
    DUPLICATE_BID = "duplicate_bid"
    SELLER_CANNOT_BID = "seller_cannot_bid"
    PRICE_NOT_SET = "price_not_set"
    PRICE_MISMATCH = "price_mismatch"
    ALREADY_SOLD = "already_sold"
    WRONG_AUCTION_TYPE = "wrong_auction_type"


class ArtMarketError(RuntimeError):
    """Base class for domain exceptions."""


class ValidationRejected(ArtMarketError):
    """Raised when a bid or action is refused by the auction rules."""

    def __init__(self, reason: RejectionReason, message: str | None = None) -> None:
        super().__init__(message or f"Rejected: {reason.value}")
        self.reason = reason


class PreconditionFailed(ArtMarketError):
    """Raised when an action is not allowed in the current game state."""


class GameNotFound(PreconditionFailed):
    """Raised when the requested game document does not exist."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id} not found")
        self.game_id = game_id


class InsufficientCardsError(ArtMarketError):
    """Raised when a deal requests more cards than the deck holds."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(f"Cannot deal {requested} cards, only {available} remain")
        self.requested = requested
        self.available = available


class ConcurrencyConflict(ArtMarketError):
    """Raised when a transaction keeps losing to concurrent writers."""

    def __init__(self, game_id: str, attempts: int) -> None:
        super().__init__(f"Game {game_id} changed concurrently {attempts} times, giving up")
        self.game_id = game_id
        self.attempts = attempts


class InvariantViolation(ArtMarketError):
    """Raised when a state change would corrupt the game."""

"""Domain models and services."""

from .bidding import BidDecision, validate_bid
from .cards import AuctionType, Card
from .deck import deal_initial_hands, generate_deck, replenish_hands, shuffle
from .exceptions import (
    ArtMarketError,
    ConcurrencyConflict,
    GameNotFound,
    InsufficientCardsError,
    InvariantViolation,
    PreconditionFailed,
    RejectionReason,
    ValidationRejected,
)
from .game import Auction, Bid, Game, GameStatus, Player, RoundResult, standings
from .resolver import AuctionResult, resolve
from .rounds import (
    CumulativePayoutStrategy,
    PayoutStrategy,
    RoundPayoutStrategy,
    check_and_advance_round,
)
from .settlement import cancel_auction, settle

__all__ = [
    "ArtMarketError",
    "Auction",
    "AuctionResult",
    "AuctionType",
    "Bid",
    "BidDecision",
    "Card",
    "ConcurrencyConflict",
    "CumulativePayoutStrategy",
    "Game",
    "GameNotFound",
    "GameStatus",
    "InsufficientCardsError",
    "InvariantViolation",
    "PayoutStrategy",
    "Player",
    "PreconditionFailed",
    "RejectionReason",
    "RoundPayoutStrategy",
    "RoundResult",
    "ValidationRejected",
    "cancel_auction",
    "check_and_advance_round",
    "deal_initial_hands",
    "generate_deck",
    "replenish_hands",
    "resolve",
    "settle",
    "shuffle",
    "standings",
    "validate_bid",
]

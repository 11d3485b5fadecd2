"""Card domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AuctionType(str, Enum):
    OPEN = "open"
    SEALED = "sealed"
    ONCE = "once"
    DOUBLE = "double"
    FIXED = "fixed"


AUCTION_TYPES: tuple[AuctionType, ...] = tuple(AuctionType)


@dataclass(frozen=True, slots=True)
class Card:
    """A painting offered at auction. Values are never stored on the card."""

    card_id: str
    artist: str
    auction_type: AuctionType

    def to_document(self) -> dict[str, Any]:
        return {"id": self.card_id, "artist": self.artist, "auctionType": self.auction_type.value}

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Card":
        return cls(
            card_id=str(data["id"]),
            artist=data["artist"],
            auction_type=AuctionType(data["auctionType"]),
        )

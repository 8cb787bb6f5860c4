from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import SessionComplete


@dataclass(frozen=True)
class StudySession:
    """State of one pass over the due cards of some decks.

    A rated card leaves ``remaining`` whatever the rating was; a card
    rated "again" comes back only in a later session.
    """

    user_id: int
    deck_ids: Tuple[int, ...]
    remaining: Tuple[int, ...]
    completed: Tuple[int, ...] = field(default=())

    @property
    def current_card_id(self) -> Optional[int]:
        return self.remaining[0] if self.remaining else None

    @property
    def is_complete(self) -> bool:
        return not self.remaining

    @property
    def total(self) -> int:
        return len(self.remaining) + len(self.completed)

    @property
    def completion(self) -> float:
        if self.total == 0:
            return 1.0
        return len(self.completed) / self.total

    def complete_card(self, card_id: int) -> "StudySession":
        if self.is_complete:
            raise SessionComplete()
        if card_id not in self.remaining:
            raise ValueError(f"Card {card_id} is not pending in this session")
        return StudySession(
            user_id=self.user_id,
            deck_ids=self.deck_ids,
            remaining=tuple(c for c in self.remaining if c != card_id),
            completed=self.completed + (card_id,),
        )

    def drop_card(self, card_id: int) -> "StudySession":
        """Remove a pending card without counting it as studied."""
        return StudySession(
            user_id=self.user_id,
            deck_ids=self.deck_ids,
            remaining=tuple(c for c in self.remaining if c != card_id),
            completed=self.completed,
        )

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "deck_ids": list(self.deck_ids),
            "remaining": list(self.remaining),
            "completed": list(self.completed),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StudySession":
        return cls(
            user_id=data["user_id"],
            deck_ids=tuple(data["deck_ids"]),
            remaining=tuple(data["remaining"]),
            completed=tuple(data.get("completed", ())),
        )

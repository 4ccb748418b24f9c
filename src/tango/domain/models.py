"""
Domain models for cards and their study records.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from typing import Any


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class CardItem:
    """
    A single vocabulary flashcard.

    Attributes:
        id: Stable identifier, unique within its deck.
        japanese: Headword as written (kanji/kana).
        hiragana: Reading.
        english: Meaning.
        japanese_example: Optional example sentence (may contain HTML).
        english_example: Optional translation of the example.
    """

    id: str
    japanese: str = ""
    hiragana: str = ""
    english: str = ""
    japanese_example: str | None = None
    english_example: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardItem":
        """
        Build a card from one entry of a deck JSON array.

        A missing or non-string id becomes "" so that deck validation can
        report it instead of failing here.
        """
        raw_id = data.get("id")
        return cls(
            id=raw_id if isinstance(raw_id, str) else "",
            japanese=_text(data.get("japanese")),
            hiragana=_text(data.get("hiragana")),
            english=_text(data.get("english")),
            japanese_example=(
                _text(data["japanese_example"]) if data.get("japanese_example") is not None else None
            ),
            english_example=(
                _text(data["english_example"]) if data.get("english_example") is not None else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "japanese": self.japanese,
            "hiragana": self.hiragana,
            "english": self.english,
        }
        if self.japanese_example is not None:
            out["japanese_example"] = self.japanese_example
        if self.english_example is not None:
            out["english_example"] = self.english_example
        return out


@dataclass(frozen=True)
class CardStats:
    """Attempt counts for a card."""

    success: int = 0
    failure: int = 0


@dataclass(frozen=True)
class CardRecord:
    """
    Persisted per-card aggregate.

    Created lazily as all zeros; the Stats Store hands out these frozen
    values so callers never hold a reference into the stored table.
    """

    success: int = 0
    failure: int = 0
    difficult: bool = False

    @property
    def counts(self) -> CardStats:
        return CardStats(success=self.success, failure=self.failure)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "failure": self.failure, "difficult": self.difficult}


@dataclass(frozen=True)
class DeckOption:
    """A deck as offered for selection."""

    key: str  # Deck source key, e.g. "n5_verbs.json"
    name: str  # Display name

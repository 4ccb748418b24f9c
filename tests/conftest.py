import itertools
import json

import pytest

from tango.domain.models import CardItem
from tango.domain.ports import DeckSource
from tango.infrastructure.card_data import KeyValueCardDataRepository
from tango.infrastructure.storage import InMemoryStorage


class SequenceRandom:
    """Deterministic stand-in for ``random``: yields the given values, then ``fill``."""

    def __init__(self, values, fill=0.0):
        self._values = itertools.chain(values, itertools.repeat(fill))

    def random(self):
        return next(self._values)


class FakeDeckSource(DeckSource):
    """Decks held in memory, keyed by name."""

    def __init__(self, decks):
        self.decks = decks

    def list_decks(self):
        return list(self.decks)

    def load_deck(self, key):
        from tango.domain.errors import DeckNotFoundError

        if key not in self.decks:
            raise DeckNotFoundError(key)
        return list(self.decks[key])


def make_card(card_id, japanese=None, hiragana=None, english=None):
    """Card with distinct text derived from its id unless given."""
    return CardItem(
        id=card_id,
        japanese=japanese if japanese is not None else f"J-{card_id}",
        hiragana=hiragana if hiragana is not None else f"H-{card_id}",
        english=english if english is not None else f"E-{card_id}",
    )


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def card_data(storage):
    return KeyValueCardDataRepository(storage)


@pytest.fixture
def zero_rng():
    return SequenceRandom([])


@pytest.fixture
def decks_dir(tmp_path):
    """Creates a temporary decks directory with two small decks."""
    d = tmp_path / "decks"
    d.mkdir()
    (d / "n5_verbs.json").write_text(
        json.dumps(
            [
                {"id": "v1", "japanese": "食べる", "hiragana": "たべる", "english": "to eat"},
                {"id": "v2", "japanese": "飲む", "hiragana": "のむ", "english": "to drink"},
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    (d / "n5_nouns.json").write_text(
        json.dumps(
            [
                {"id": "n1", "japanese": "水", "hiragana": "みず", "english": "water"},
                {"id": "n2", "japanese": "食べる", "hiragana": "x", "english": "y"},
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return d


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/data
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture(name="make_card")
def make_card_fixture():
    return make_card


@pytest.fixture
def sequence_rng():
    """Factory: ``sequence_rng([0.99, 0.0])`` pins the random draws."""
    return SequenceRandom


@pytest.fixture
def deck_source_factory():
    return FakeDeckSource

"""
Study session controller.

Holds the cards of one run as a list whose head is the current card.
Outcomes are recorded at most once per card id per run: only the first
known/unknown judgement counts, later ones just move the card.
"""

import logging

from tango.domain.constants import DEFAULT_RANDOM_COUNT
from tango.domain.errors import DeckLoadError
from tango.domain.models import CardItem, CardStats
from tango.domain.ports import CardDataRepository, DeckSource

from .decks import load_all_cards, validate_ids
from .sampling import RandomSource, draw_random_run, shuffle

logger = logging.getLogger(__name__)


class StudySession:
    def __init__(
        self,
        card_data: CardDataRepository,
        deck_source: DeckSource,
        *,
        random_count: int = DEFAULT_RANDOM_COUNT,
        prioritize_difficult: bool = False,
        rng: RandomSource | None = None,
    ):
        self.card_data = card_data
        self.deck_source = deck_source
        self.random_count = random_count
        self.prioritize_difficult = prioritize_difficult
        self._rng = rng

        self.deck: list[CardItem] = []
        self.selected_deck_key: str | None = None
        self.is_random_run = False
        self.flipped = False
        self._initial_random_deck: list[CardItem] | None = None
        self._counted: set[str] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current(self) -> CardItem | None:
        return self.deck[0] if self.deck else None

    @property
    def remaining(self) -> int:
        return len(self.deck)

    @property
    def is_complete(self) -> bool:
        return self.current is None and (self.is_random_run or self.selected_deck_key is not None)

    @property
    def counted_ids(self) -> frozenset[str]:
        return frozenset(self._counted)

    def current_counts(self) -> CardStats:
        card = self.current
        if card is None:
            return CardStats()
        return self.card_data.get_counts(card.id)

    def current_is_difficult(self) -> bool:
        card = self.current
        return self.card_data.is_difficult(card.id) if card is not None else False

    # ------------------------------------------------------------------
    # Starting runs
    # ------------------------------------------------------------------

    def _load(self, key: str) -> list[CardItem] | None:
        try:
            return self.deck_source.load_deck(key)
        except DeckLoadError as e:
            logger.warning(f"Could not load deck {key}: {e}")
            return None

    def select_deck(self, key: str) -> None:
        """
        Start a run over one deck, in shuffled order.

        A deck that cannot be loaded gives an empty run.

        Raises:
            DeckValidationError: The deck has a missing or duplicate id.
        """
        self.is_random_run = False
        self.selected_deck_key = key
        self._counted.clear()
        self.deck = []
        self.flipped = False

        loaded = self._load(key) or []
        validate_ids(loaded)
        self.deck = shuffle(loaded, self._rng)

    def sample_random_run(self, pool: list[CardItem]) -> list[CardItem]:
        return draw_random_run(
            pool,
            self.card_data.get_all_records(),
            self.random_count,
            prioritize_difficult=self.prioritize_difficult,
            rng=self._rng,
        )

    def start_random(self) -> None:
        """
        Start a run over an adaptive sample of every deck.

        Raises:
            DeckValidationError: The sample has a missing or duplicate id.
        """
        pool = load_all_cards(self.deck_source)
        sampled = self.sample_random_run(pool)

        self.is_random_run = True
        self._counted.clear()
        self.deck = []
        self.flipped = False

        validate_ids(sampled)
        initial = shuffle(sampled, self._rng)
        self._initial_random_deck = initial
        self.deck = list(initial)
        logger.info(f"Random run: {len(initial)} of {len(pool)} cards")

    def restart(self) -> None:
        """Replay a random run in its original order, or reshuffle the selected deck."""
        if self.is_random_run:
            self._counted.clear()
            initial = self._initial_random_deck or []
            if initial:
                validate_ids(initial)
                self.deck = list(initial)
            self.flipped = False
            return

        if self.selected_deck_key is None:
            return

        loaded = self._load(self.selected_deck_key)
        if loaded is None:
            return
        self._counted.clear()
        validate_ids(loaded)
        self.deck = shuffle(loaded, self._rng)
        self.flipped = False

    # ------------------------------------------------------------------
    # Judgements
    # ------------------------------------------------------------------

    def _count_once(self, card: CardItem, known: bool) -> bool:
        if card.id in self._counted:
            return False
        if known:
            self.card_data.increment_success(card.id)
        else:
            self.card_data.increment_failure(card.id)
        self._counted.add(card.id)
        return True

    def flip(self) -> bool:
        self.flipped = not self.flipped
        return self.flipped

    def mark_known(self) -> bool:
        """
        Record success (once per run) and drop the current card.

        Returns:
            True if this call recorded an outcome.
        """
        card = self.current
        if card is None:
            return False
        counted = self._count_once(card, known=True)
        self.deck = self.deck[1:]
        self.flipped = False
        return counted

    def mark_unknown(self) -> bool:
        """
        Record failure (once per run) and put the card back at a random position.

        Returns:
            True if this call recorded an outcome.
        """
        card = self.current
        if card is None:
            return False
        counted = self._count_once(card, known=False)
        self.deck = shuffle(self.deck[1:] + [card], self._rng)
        self.flipped = False
        return counted

    def reshuffle(self) -> None:
        """Shuffle the cards still in the run. Outcomes already recorded stay counted."""
        self.deck = shuffle(self.deck, self._rng)
        self.flipped = False

    def toggle_difficult(self) -> bool | None:
        """Toggle the current card's difficult flag; None when there is no card."""
        card = self.current
        if card is None:
            return None
        return self.card_data.toggle_difficult(card.id)

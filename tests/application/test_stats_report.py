import pytest

from tango.application.stats_report import build_stats_report, summarize
from tango.domain.models import CardRecord


def test_report_ranks_weakest_first(make_card):
    cards = [make_card(i) for i in "abcd"]
    records = {
        "a": CardRecord(success=3, failure=1),
        "b": CardRecord(success=0, failure=2, difficult=True),
        "c": CardRecord(success=1, failure=1),
    }

    rows = build_stats_report(cards, records)

    assert [r.card.id for r in rows] == ["b", "c", "a", "d"]
    assert rows[0].failure_ratio == 1.0
    assert rows[-1].attempts == 0


def test_ties_broken_by_attempts_then_input_order(make_card):
    cards = [make_card(i) for i in "abc"]
    records = {"a": CardRecord(1, 1), "b": CardRecord(2, 2), "c": CardRecord(1, 1)}
    assert [r.card.id for r in build_stats_report(cards, records)] == ["b", "a", "c"]


def test_filters_and_limit(make_card):
    cards = [make_card(i) for i in "abc"]
    records = {"a": CardRecord(difficult=True), "c": CardRecord(0, 1, True)}

    assert [r.card.id for r in build_stats_report(cards, records, difficult_only=True)] == ["c", "a"]
    assert len(build_stats_report(cards, records, limit=1)) == 1
    assert build_stats_report(cards, records, limit=-2) == []


def test_summarize(make_card):
    cards = [make_card(i) for i in "abc"]
    records = {"a": CardRecord(3, 1), "b": CardRecord(0, 0, True)}

    summary = summarize(build_stats_report(cards, records))

    assert summary.cards == 3
    assert summary.attempted == 1
    assert summary.difficult == 1
    assert summary.failure_ratio == pytest.approx(0.25)

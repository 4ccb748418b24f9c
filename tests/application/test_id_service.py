import json

import pytest

from tango.application.id_service import assign_card_ids, assign_ids_in_deck, generate_card_id
from tango.domain.errors import DeckLoadError


def test_generate_card_id():
    assert generate_card_id("verbs", 7) == "verbs-0007"


def test_assign_ids_in_deck():
    cards = [
        {"id": "keep", "japanese": "A"},
        {"japanese": "B"},
        {"id": "  ", "japanese": "C"},
        {"id": "keep", "japanese": "D"},
        {"id": "keep", "japanese": "E"},
        "junk",
    ]
    updated, changed = assign_ids_in_deck(cards, "verbs")

    assert [c["id"] if isinstance(c, dict) else c for c in updated] == [
        "keep",
        "verbs-0002",
        "verbs-0003",
        "keep-01",
        "keep-02",
        "junk",
    ]
    assert changed == 4
    assert "id" not in cards[1]


def test_assign_card_ids_rewrites_files(tmp_path):
    deck = tmp_path / "kana.json"
    deck.write_text(json.dumps([{"japanese": "あ"}, {"id": "x", "japanese": "い"}]), encoding="utf-8")
    untouched = tmp_path / "ok.json"
    untouched.write_text('[{"id": "ok-1"}]', encoding="utf-8")

    assert assign_card_ids(tmp_path) == 1

    content = deck.read_text(encoding="utf-8")
    assert json.loads(content)[0] == {"japanese": "あ", "id": "kana-0001"}
    assert content.endswith("\n")
    assert "あ" in content
    assert untouched.read_text(encoding="utf-8") == '[{"id": "ok-1"}]'


def test_assign_card_ids_dry_run(tmp_path):
    deck = tmp_path / "kana.json"
    deck.write_text('[{"japanese": "a"}]', encoding="utf-8")

    assert assign_card_ids(tmp_path, dry_run=True) == 1
    assert deck.read_text(encoding="utf-8") == '[{"japanese": "a"}]'


def test_assign_card_ids_skips_non_arrays_and_raises_on_bad_json(tmp_path):
    (tmp_path / "obj.json").write_text('{"id": null}', encoding="utf-8")
    assert assign_card_ids(tmp_path) == 0

    (tmp_path / "bad.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(DeckLoadError):
        assign_card_ids(tmp_path)

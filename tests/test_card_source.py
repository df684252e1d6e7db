import json
import logging

import pytest

from civicsflash.card import Card
from civicsflash.card_source import apply_overrides, bank_loader, drop_duplicates, load_bank, load_cards
from civicsflash.filework import JsonSettingsStore
from civicsflash.overrides import DEFAULT_VARY_MESSAGE, MemorySettingsStore


def test_load_cards_flattens_in_order_with_category(raw_bank):
    cards = load_cards(raw_bank, {})

    assert [card.id for card in cards] == [1, 2, 23, 29, 61, 62]
    assert cards[0].category == "Principles of American Democracy"
    assert cards[2].category == "System of Government"
    assert cards[1].answers == ("sets up the government", "defines the government")


def test_override_replaces_answers_with_single_value(raw_bank):
    cards = {card.id: card for card in load_cards(raw_bank, {23: "Jane Doe"})}

    assert cards[23].answers == ("Jane Doe",)
    assert cards[29].answers == (DEFAULT_VARY_MESSAGE,)
    assert cards[61].answers == (DEFAULT_VARY_MESSAGE,)
    assert cards[62].answers == (DEFAULT_VARY_MESSAGE,)
    assert cards[1].answers == ("the Constitution",)


def test_empty_override_uses_placeholder(raw_bank):
    cards = {card.id: card for card in load_cards(raw_bank, {23: ""})}
    assert cards[23].answers == (DEFAULT_VARY_MESSAGE,)


def test_overrides_only_touch_eligible_ids():
    cards = [Card(5, "C", "Q", ("keep",))]
    assert apply_overrides(cards, {5: "replace"}) == cards


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [{"name": "No questions"}],
        [{"questions": []}],
        ["not a mapping"],
        [{"name": "C", "questions": [{"id": 1}]}],
        [{"name": "C", "questions": [{"id": "x", "question": "Q", "answers": []}]}],
    ],
)
def test_malformed_bank_degrades_to_empty(raw):
    assert load_cards(raw, {}) == []


def test_empty_bank_is_allowed():
    assert load_cards([], {}) == []


def test_duplicate_ids_keep_first(caplog):
    raw = [
        {"name": "A", "questions": [{"id": 1, "question": "first", "answers": []}]},
        {"name": "B", "questions": [{"id": 1, "question": "second", "answers": []}]},
    ]

    with caplog.at_level(logging.WARNING):
        cards = load_cards(raw, {})

    assert [card.question for card in cards] == ["first"]
    assert "duplicate question id 1" in caplog.text


def test_load_bank_reads_file_and_store(tmp_path, raw_bank):
    bank_path = tmp_path / "questions.json"
    bank_path.write_text(json.dumps({"categories": raw_bank}), encoding="utf-8")
    store = MemorySettingsStore({"capital": "Albany"})

    cards = {card.id: card for card in load_bank(bank_path, store)}

    assert len(cards) == 6
    assert cards[62].answers == ("Albany",)


def test_load_bank_missing_file_is_empty(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert load_bank(tmp_path / "missing.json") == []
    assert "Question bank not found" in caplog.text


def test_load_bank_invalid_json_is_empty(tmp_path):
    bank_path = tmp_path / "questions.json"
    bank_path.write_text("{not json", encoding="utf-8")
    assert load_bank(bank_path) == []


def test_bank_loader_picks_up_settings_edits(tmp_path, raw_bank):
    bank_path = tmp_path / "questions.json"
    bank_path.write_text(json.dumps({"categories": raw_bank}), encoding="utf-8")
    store = MemorySettingsStore()
    loader = bank_loader(bank_path, store)

    before = {card.id: card for card in loader()}
    store.set("governor", "Ann Smith")
    after = {card.id: card for card in loader()}

    assert before[61].answers == (DEFAULT_VARY_MESSAGE,)
    assert after[61].answers == ("Ann Smith",)


def test_unreadable_settings_file_loads_bank_without_overrides(tmp_path, raw_bank, caplog):
    bank_path = tmp_path / "questions.json"
    bank_path.write_text(json.dumps({"categories": raw_bank}), encoding="utf-8")
    settings_path = tmp_path / "settings.json"
    settings_path.write_text("{truncated", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        cards = {card.id: card for card in load_bank(bank_path, JsonSettingsStore(settings_path))}

    assert len(cards) == 6
    assert cards[23].answers == (DEFAULT_VARY_MESSAGE,)
    assert cards[1].answers == ("the Constitution",)
    assert "Settings are unreadable" in caplog.text


def test_drop_duplicates_keeps_first_card_per_id():
    first = Card(1, "A", "first", ())
    cards = [first, Card(2, "A", "other", ()), Card(1, "B", "second", ())]

    assert drop_duplicates(cards) == [first, cards[1]]

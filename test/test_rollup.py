#!/usr/bin/env python3
"""Rollup: full rewalk and inline variants, each with its own word separator."""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from postlex.pipeline.processors.pronunciation import (
    INLINE_SEPARATOR,
    REWALK_SEPARATOR,
    SyllableRollup,
    WordRollup,
    create_substructure,
    syllable_rollup,
    update_transcriptions_from_phones,
    whitespace_segment,
)
from postlex.schema import PhoneNode, Stress, SyllableNode, WordNode


def parsed(transcription, accent=None):
    word = WordNode(transcription=transcription, accent=accent)
    create_substructure(word, whitespace_segment)
    return word


def test_separators_are_pinned():
    assert REWALK_SEPARATOR == " - "
    assert INLINE_SEPARATOR == " -"


@pytest.mark.parametrize(
    "transcription, expected",
    [
        ("a", "a"),
        ("'h a - l o:", "'h a - l o:"),
        (",g e: - 'b U r - t s - t a: k", ",g e: - 'b U r - t s - t a: k"),
        ("'?  a  x-t @ n", "'? a x - t @ n"),
        ("' h a -l o:", "'h a - l o:"),
    ],
)
def test_parse_then_rewalk_round_trip(transcription, expected):
    word = parsed(transcription)
    update_transcriptions_from_phones(word)

    assert word.transcription == expected
    reparsed = parsed(word.transcription)
    assert [(s.stress, [p.symbol for p in s.phones]) for s in reparsed.syllables] == \
        [(s.stress, [p.symbol for p in s.phones]) for s in word.syllables]


def test_rewalk_is_idempotent():
    word = parsed("'h a - l o:", accent="H*")
    update_transcriptions_from_phones(word)
    first = (word.transcription, [s.transcription for s in word.syllables])
    update_transcriptions_from_phones(word)
    second = (word.transcription, [s.transcription for s in word.syllables])
    assert first == second == ("'h a - l o:", ["'h a", "l o:"])


def test_rewalk_reflects_live_phones():
    word = parsed("'h a - l o:")
    first, second = word.syllables
    first.insert_before(PhoneNode("?"), first.phones[0])
    second.remove_phone(second.phones[0])

    update_transcriptions_from_phones(word)

    assert first.transcription == "'? h a"
    assert second.transcription == "o:"
    assert word.transcription == "'? h a - o:"


def test_syllable_rollup_has_no_space_after_marker():
    syllable = SyllableNode(stress=Stress.SECONDARY, phones=[PhoneNode("b"), PhoneNode("a")])
    assert syllable_rollup(syllable) == ",b a"


def test_rollup_of_emptied_syllables():
    word = parsed("a - 'b")
    for syllable in word.syllables:
        syllable.phones.clear()
    update_transcriptions_from_phones(word)
    assert [s.transcription for s in word.syllables] == ["", "'"]
    # no separator before the first non-empty piece
    assert word.transcription == "'"


def test_inline_syllable_rollup_skips_deleted_pieces():
    rollup = SyllableRollup(Stress.PRIMARY)
    rollup.add("h")
    rollup.add("")
    rollup.add("a: r")
    assert rollup.text == "'h a: r"


def test_inline_syllable_rollup_all_deleted():
    rollup = SyllableRollup(Stress.NONE)
    rollup.add("")
    assert rollup.text == ""


def test_inline_word_rollup_separator():
    rollup = WordRollup()
    rollup.add("'h a")
    rollup.add("l o:")
    assert rollup.text == "'h a -l o:"


def test_inline_word_rollup_skips_separator_while_empty():
    rollup = WordRollup()
    rollup.add("")
    rollup.add("a")
    rollup.add(",b")
    assert rollup.text == "a -,b"

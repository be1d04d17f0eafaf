#!/usr/bin/env python3
"""Pronunciation processor: per-word flow, rules hook, predictive pass, metrics."""
import copy
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from postlex.config.settings import PronunciationConfig
from postlex.models.prediction import PredictorTable, StaticPredictor
from postlex.pipeline.processors.pronunciation import (
    MalformedTranscriptionError,
    PostlexicalRules,
    PronunciationModel,
    SymbolMapRules,
    create_substructure,
    run,
    update_transcriptions_from_phones,
    whitespace_segment,
)
from postlex.schema import Stress, WordNode


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("POSTLEX_TREE_DIR", raising=False)
    monkeypatch.delenv("POSTLEX_CONTEXT_BUILDER", raising=False)


def words(*transcriptions):
    return [WordNode(transcription=t) for t in transcriptions]


def tree_shape(word):
    return [(s.stress, s.accent, [p.symbol for p in s.phones]) for s in word.syllables]


def test_without_predictors_source_transcription_is_kept():
    word = WordNode(transcription="'h a - l o:", accent="H*", text="Hallo")

    result = run([word])

    assert word.transcription == "'h a - l o:"
    assert [s.transcription for s in word.syllables] == ["'h a ", " l o:"]
    assert tree_shape(word) == [
        (Stress.PRIMARY, "H*", ["h", "a"]),
        (Stress.NONE, None, ["l", "o:"]),
    ]
    assert result.metrics["predictive_pass"] is False
    assert result.metrics["predicted"] == 0
    assert result.metrics["passthrough"] == 0
    assert result.data["words"] == [word]


def test_empty_table_is_pass_through():
    word = WordNode(transcription="'h a - l o:", accent="H*")
    reference = copy.deepcopy(word)
    reference_model = PronunciationModel(whitespace_segment)
    reference_model.process_word(reference)
    update_transcriptions_from_phones(reference)

    result = run([word], predictors=PredictorTable())

    assert tree_shape(word) == tree_shape(reference)
    assert [s.transcription for s in word.syllables] == [s.transcription for s in reference.syllables]
    # same syllables, each rollup variant keeps its own separator
    assert reference.transcription == "'h a - l o:"
    assert word.transcription == "'h a -l o:"
    assert result.metrics["passthrough"] == 4
    assert result.metrics["missing_models"] == ["a", "h", "l", "o:"]
    assert result.warnings == ["No model for phonemes: a h l o:"]


def test_predictions_rewrite_tree_and_transcriptions():
    table = PredictorTable({
        "?": StaticPredictor(""),
        "a": StaticPredictor("a:"),
        "t": StaticPredictor("t s"),
        "n": StaticPredictor("n"),
    })
    word = WordNode(transcription="'? a - t @ n", accent="L*")

    result = run([word], predictors=table)

    assert tree_shape(word) == [
        (Stress.PRIMARY, "L*", ["a:"]),
        (Stress.NONE, None, ["t", "s", "@", "n"]),
    ]
    assert [s.transcription for s in word.syllables] == ["'a:", "t s @ n"]
    assert word.transcription == "'a: -t s @ n"
    assert result.metrics == {
        "words": 1,
        "syllables": 2,
        "phones_in": 5,
        "phones_out": 5,
        "predicted": 4,
        "passthrough": 1,
        "deleted": 1,
        "inserted": 1,
        "substituted": 1,
        "rules_changed": 0,
        "missing_models": ["@"],
        "predictive_pass": True,
    }


def test_default_context_builder_is_used():
    class ContextCapture:
        def __init__(self):
            self.contexts = []

        def predict(self, context):
            self.contexts.append(context)
            return "b"

    predictor = ContextCapture()
    run(words(",a b"), predictors=PredictorTable({"b": predictor}))

    assert predictor.contexts == [{
        "phone": "b",
        "prev_phone": "a",
        "next_phone": "_",
        "pos_in_syllable": 1,
        "syllable_size": 2,
        "stress": "2",
        "accent": None,
    }]


def test_rules_change_triggers_full_rewalk():
    word = WordNode(transcription="'h a - l o:")
    result = run([word], apply_rules=SymbolMapRules({"h": "", "o:": "O"}))

    assert tree_shape(word) == [
        (Stress.PRIMARY, None, ["a"]),
        (Stress.NONE, None, ["l", "O"]),
    ]
    assert word.transcription == "'a - l O"
    assert result.metrics["rules_changed"] == 1


def test_rule_replacement_with_several_symbols_splits_the_phone():
    word = WordNode(transcription="'t a")
    result = run([word], apply_rules=SymbolMapRules({"t": "t s"}))

    assert tree_shape(word) == [(Stress.PRIMARY, None, ["t", "s", "a"])]
    assert word.transcription == "'t s a"
    assert result.metrics["rules_changed"] == 1

    # the written transcription parses back into the same tree
    reparsed = WordNode(transcription=word.transcription)
    create_substructure(reparsed, whitespace_segment)
    assert tree_shape(reparsed) == tree_shape(word)


def test_unchanged_rules_do_not_rewalk():
    word = WordNode(transcription="'h a -l o:")
    result = run([word], apply_rules=PostlexicalRules())
    assert word.transcription == "'h a -l o:"
    assert result.metrics["rules_changed"] == 0


def test_rules_run_before_prediction():
    seen = []

    class Recorder:
        def predict(self, context):
            seen.append(context["phone"])
            return context["phone"]

    run(
        words("x y"),
        predictors=PredictorTable({"z": Recorder(), "y": Recorder()}),
        apply_rules=SymbolMapRules({"x": "z"}),
    )
    assert seen == ["z", "y"]


def test_rollup_after_parse():
    word = WordNode(transcription=" 'h a-l o: ")
    run([word], rollup_after_parse=True)
    assert [s.transcription for s in word.syllables] == ["'h a", "l o:"]
    assert word.transcription == "'h a - l o:"


def test_empty_transcription_word():
    word = WordNode(transcription="")
    result = run([word], predictors=PredictorTable({"a": StaticPredictor("b")}))
    assert word.syllables == []
    assert word.transcription == ""
    assert result.metrics["words"] == 1
    assert result.metrics["syllables"] == 0


def test_malformed_word_aborts_and_is_logged(capsys):
    batch = [WordNode(transcription="a"), WordNode(transcription="a--b", text="bad")]
    with pytest.raises(MalformedTranscriptionError):
        run(batch)
    assert "Malformed transcription for word 'bad'" in capsys.readouterr().err
    # the first word was already processed
    assert len(batch[0].syllables) == 1


def test_segmenter_failure_is_logged_and_propagated(capsys):
    def segment(text):
        raise LookupError(f"no allophone in {text!r}")

    with pytest.raises(LookupError):
        run([WordNode(transcription="q", text="Q")], segment=segment)
    assert "Segmentation failed for word 'Q' [q], syllable 0: LookupError" in capsys.readouterr().err


def test_predictor_failure_names_word_and_syllable(capsys):
    class Broken:
        def predict(self, context):
            raise RuntimeError("bad tree")

    word = WordNode(transcription="a - 'b", text="ab")
    with pytest.raises(RuntimeError, match="bad tree"):
        run([word], predictors=PredictorTable({"b": Broken()}))

    err = capsys.readouterr().err
    assert "word 'ab' [a - 'b], syllable 1" in err
    assert "phone 'b'" in err


def test_from_config_needs_a_tree_loader(tmp_path):
    config = PronunciationConfig(tree_dir=str(tmp_path))
    with pytest.raises(ValueError, match="no tree_loader"):
        PronunciationModel.from_config(config)


def test_from_config_loads_trees(tmp_path):
    (tmp_path / "prediction_a.tree").write_text("e", encoding="utf-8")
    config = PronunciationConfig(tree_dir=str(tmp_path), context_builder="phone_only")

    model = PronunciationModel.from_config(
        config,
        tree_loader=lambda path: StaticPredictor(path.read_text(encoding="utf-8")),
    )
    word = model.process_word(WordNode(transcription="'a"))

    assert model.predictive
    assert word.transcription == "'e"


def test_from_config_without_trees_skips_prediction():
    model = PronunciationModel.from_config(PronunciationConfig())
    assert not model.predictive


def test_explicit_predictors_win_over_tree_dir(tmp_path):
    config = PronunciationConfig(tree_dir=str(tmp_path / "missing"))
    model = PronunciationModel.from_config(config, predictors=PredictorTable({"a": StaticPredictor("o")}))
    assert model.process_word(WordNode(transcription="a")).transcription == "o"

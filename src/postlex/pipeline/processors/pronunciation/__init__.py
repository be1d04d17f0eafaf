"""
Pronunciation processor: post-lexical rewrite of word transcriptions.

Modules:
- parse: flat transcription -> syllable / phone tree
- predict: per-phone predictor dispatch
- edit: apply predictions to the phone list
- rollup: regenerate syllable / word transcriptions
- rules: optional rule hook applied before prediction
- processor: the public entry (run, PronunciationModel)
"""
from .edit import EditKind, apply_prediction
from .errors import MalformedTranscriptionError
from .parse import create_substructure
from .predict import PredictionDispatcher, PredictionOutcome
from .processor import PronunciationModel, PronunciationStats, run, run_model
from .rollup import (
    INLINE_SEPARATOR,
    REWALK_SEPARATOR,
    SyllableRollup,
    WordRollup,
    syllable_rollup,
    update_transcriptions_from_phones,
)
from .rules import PostlexicalRules, SymbolMapRules, load_symbol_map_rules
from .segment import whitespace_segment

__all__ = [
    "EditKind",
    "apply_prediction",
    "MalformedTranscriptionError",
    "create_substructure",
    "PredictionDispatcher",
    "PredictionOutcome",
    "PronunciationModel",
    "PronunciationStats",
    "run",
    "run_model",
    "INLINE_SEPARATOR",
    "REWALK_SEPARATOR",
    "SyllableRollup",
    "WordRollup",
    "syllable_rollup",
    "update_transcriptions_from_phones",
    "PostlexicalRules",
    "SymbolMapRules",
    "load_symbol_map_rules",
    "whitespace_segment",
]

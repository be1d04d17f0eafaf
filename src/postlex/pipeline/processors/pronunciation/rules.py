"""
Post-lexical rules: tree edits applied before the predictive pass.

A rule hook takes a parsed word and returns True when it changed the tree;
the stage then rewrites the word's transcriptions from the phones.
"""
import json
from pathlib import Path
from typing import Callable, Dict, Mapping

from postlex.schema import WordNode
from postlex.utils.logger import info

from .edit import EditKind, apply_prediction
from .predict import PredictionOutcome, split_prediction

RuleHook = Callable[[WordNode], bool]


class PostlexicalRules:
    """Base rule set. Language-specific subclasses override apply()."""

    def apply(self, word: WordNode) -> bool:
        return False

    def __call__(self, word: WordNode) -> bool:
        return self.apply(word)


class SymbolMapRules(PostlexicalRules):
    """
    Rewrite phone symbols by table lookup.

    mapping: {"symbol": "replacement"}. The replacement is read like a
    prediction: "" deletes the phone, "t s" splits it into two phone nodes.
    """

    def __init__(self, mapping: Mapping[str, str]):
        self.mapping: Dict[str, str] = dict(mapping)

    def apply(self, word: WordNode) -> bool:
        changed = False
        for syllable in word.syllables:
            for phone in syllable.snapshot():
                replacement = self.mapping.get(phone.symbol)
                if replacement is None:
                    continue
                outcome = PredictionOutcome(
                    phone=phone, symbols=split_prediction(replacement), source="rule",
                )
                if apply_prediction(syllable, outcome) is not EditKind.UNCHANGED:
                    changed = True
        return changed


def load_symbol_map_rules(json_path: str | Path) -> SymbolMapRules:
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Rules file not found: {json_path}")

    with open(json_path, "r", encoding="utf-8") as f:
        mapping = json.load(f)

    if not isinstance(mapping, dict) or not all(isinstance(v, str) for v in mapping.values()):
        raise ValueError(f"Rules file must be a JSON object of strings: {json_path}")

    info(f"Loaded symbol rules: {len(mapping)} entries from {json_path}")
    return SymbolMapRules(mapping)

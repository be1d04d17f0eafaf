"""
Rollup: 从树重新生成扁平的 transcription。

两种写法，词级 transcription 的音节分隔符不同：
- full rewalk（规则改动之后）: " - "
- inline（预测过程中逐步拼接）: " -"，下一个音节直接接在后面
下游同时依赖这两种格式，不要合并。
"""
from typing import List

from postlex.schema import Stress, SyllableNode, WordNode

REWALK_SEPARATOR = " - "
INLINE_SEPARATOR = " -"


def append_syllable(word_ph: str, syl_ph: str, separator: str) -> str:
    """Append a syllable rollup; the separator only goes after existing text."""
    if word_ph:
        word_ph += separator
    return word_ph + syl_ph


def syllable_rollup(syllable: SyllableNode) -> str:
    """Stress marker followed by the live phone symbols joined by single spaces."""
    return syllable.stress.marker + " ".join(p.symbol for p in syllable.phones)


def update_transcriptions_from_phones(word: WordNode) -> None:
    """
    Full rewalk：根据当前音素重写每个音节的 transcription 和词的
    transcription。幂等。
    """
    word_ph = ""
    for syllable in word.syllables:
        syllable.transcription = syllable_rollup(syllable)
        word_ph = append_syllable(word_ph, syllable.transcription, REWALK_SEPARATOR)
    word.transcription = word_ph


class SyllableRollup:
    """Syllable transcription accumulated phone by phone during prediction."""

    def __init__(self, stress: Stress):
        self.prefix = stress.marker
        self.pieces: List[str] = []

    def add(self, piece: str) -> None:
        # 被删除的音素什么都不贡献，连分隔空格也没有
        if piece:
            self.pieces.append(piece)

    @property
    def text(self) -> str:
        return self.prefix + " ".join(self.pieces)


class WordRollup:
    """Word transcription accumulated syllable by syllable during prediction."""

    def __init__(self):
        self.text = ""

    def add(self, syl_ph: str) -> None:
        self.text = append_syllable(self.text, syl_ph, INLINE_SEPARATOR)

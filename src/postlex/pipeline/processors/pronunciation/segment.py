"""
Tokeniser for transcriptions whose phones are already space separated.

This is not a phonetic segmenter: it cannot split "ha:" into "h" and "a:".
Stages that need that inject a segmenter backed by a phoneme inventory.
"""
from typing import List

from postlex.schema import STRESS_MARKERS


def whitespace_segment(syllable_text: str) -> List[str]:
    """
    Split a syllable string on whitespace, dropping stress markers.

    >>> whitespace_segment("'h a:")
    ['h', 'a:']
    """
    text = syllable_text.strip()
    while text and text[0] in STRESS_MARKERS:
        text = text[1:]
    return text.split()

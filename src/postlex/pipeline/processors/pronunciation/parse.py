"""
Transcription Parser: 扁平的词 transcription -> 音节 / 音素树。

输入格式：音节之间用 "-" 分隔，每个音节可以以重音标记开头
（"'" 主重音，"," 次重音），例如 "'h a - l o:"。
"""
from typing import Callable, List, Sequence

from postlex.schema import STRESS_MARKERS, PhoneNode, Stress, SyllableNode, WordNode
from postlex.utils.logger import error

from .errors import MalformedTranscriptionError

Segmenter = Callable[[str], Sequence[str]]

SYLLABLE_BOUNDARY = "-"


def parse_syllable(syl_string: str, index: int, word: WordNode, segment: Segmenter) -> SyllableNode:
    body = syl_string.strip()
    stress = Stress.NONE
    rest = body
    if body and body[0] in STRESS_MARKERS:
        stress = Stress.from_marker(body[0])
        rest = body[1:].lstrip()

    if not rest:
        raise MalformedTranscriptionError(
            "Empty syllable", transcription=word.transcription, syllable_index=index,
        )
    if rest[0] in STRESS_MARKERS:
        raise MalformedTranscriptionError(
            f"Unexpected stress marker {rest[0]!r}",
            transcription=word.transcription,
            syllable_index=index,
        )

    syllable = SyllableNode(
        stress=stress,
        # 只有主重音音节继承词的 accent
        accent=word.accent if stress is Stress.PRIMARY else None,
        # 第一次 rollup 之前保留原始文本
        transcription=syl_string,
    )
    try:
        symbols = list(segment(body))
    except Exception as e:
        error(
            f"Segmentation failed for word {word.describe()}, syllable {index}: "
            f"{type(e).__name__}: {e}"
        )
        raise
    for symbol in symbols:
        syllable.append_phone(PhoneNode(symbol=symbol))
    return syllable


def create_substructure(word: WordNode, segment: Segmenter) -> None:
    """
    由 word.transcription 构建 word.syllables。

    空 transcription 不做任何处理。所有音节都解析成功后才挂到词上，
    失败时词上不会留下任何音节。

    Args:
        word: 有 transcription、尚无音节的词
        segment: 把一个音节字符串（含重音标记）切分成音素符号

    Raises:
        MalformedTranscriptionError: 空音节或重音标记位置不对
        ValueError: 词已经有音节
        Exception: segment 抛出的任何异常，记录词和音节序号后原样抛出
    """
    if word.transcription == "":
        return
    if word.syllables:
        raise ValueError(f"Word {word.describe()} already has {len(word.syllables)} syllables")

    syllables: List[SyllableNode] = []
    for index, syl_string in enumerate(word.transcription.split(SYLLABLE_BOUNDARY)):
        syllables.append(parse_syllable(syl_string, index, word, segment))
    word.syllables.extend(syllables)

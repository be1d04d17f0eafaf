"""
Tree Editor: 把一条预测结果应用到实时音素列表上。
"""
from enum import Enum

from postlex.schema import PhoneNode, SyllableNode

from .predict import PredictionOutcome


class EditKind(str, Enum):
    DELETED = "deleted"
    INSERTED = "inserted"
    SUBSTITUTED = "substituted"
    UNCHANGED = "unchanged"


def apply_prediction(syllable: SyllableNode, outcome: PredictionOutcome) -> EditKind:
    """
    针对一个原始音素修改 syllable.phones。

    - 删除：移除该音素节点
    - n 个符号：前 n-1 个符号依次新建节点，插在原节点之前；原节点改用
      最后一个符号（复用而非替换，外部引用保持有效）

    节点按 identity 定位，同一音节内之前的改动不会让目标错位。
    """
    phone = outcome.phone
    if not outcome.symbols:
        syllable.remove_phone(phone)
        return EditKind.DELETED

    *inserted, last = outcome.symbols
    for symbol in inserted:
        syllable.insert_before(PhoneNode(symbol=symbol), phone)

    changed = phone.symbol != last
    if changed:
        phone.symbol = last

    if inserted:
        return EditKind.INSERTED
    return EditKind.SUBSTITUTED if changed else EditKind.UNCHANGED

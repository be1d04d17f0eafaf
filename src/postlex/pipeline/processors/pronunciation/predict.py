"""
Prediction Dispatcher: 逐音素查询对应的预测器。

职责：
- 预测前先对音素列表做快照（tree editor 会在同一个列表上插入/删除节点）
- 上下文按音素惰性构建，每次查询都能看到前面音素的改动
- 没有模型的音素原样保留（passthrough）
"""
from dataclasses import dataclass
from typing import Iterator, Literal, Mapping, Optional, Tuple

from postlex.models.prediction import ContextBuilder, Predictor
from postlex.schema import PhoneNode, SyllableNode
from postlex.utils.logger import debug, error

from .rollup import SyllableRollup

OutcomeSource = Literal["model", "passthrough", "rule"]


@dataclass(frozen=True)
class PredictionOutcome:
    """
    Prediction result for one original phone.

    - phone: the original node the outcome applies to
    - symbols: predicted phone sequence (length >= 1), or None to delete the phone
    - source: "model" when a predictor answered, "passthrough" when none exists,
      "rule" for a rewrite made by a post-lexical rule set
    """
    phone: PhoneNode
    symbols: Optional[Tuple[str, ...]]
    source: OutcomeSource = "model"

    @property
    def is_deletion(self) -> bool:
        return not self.symbols

    @property
    def text(self) -> str:
        """Space-delimited prediction as it appears in the rollup ("" for deletion)."""
        return " ".join(self.symbols) if self.symbols else ""


def split_prediction(prediction: str) -> Optional[Tuple[str, ...]]:
    """"a b c" -> ("a", "b", "c"); "" -> None (deletion)."""
    symbols = tuple(s for s in prediction.split(" ") if s)
    return symbols or None


class PredictionDispatcher:
    """
    为每个音素查找预测器并得出结果。

    Args:
        predictors: 只读的 符号 -> 预测器 映射（精确匹配）
        build_context: 为音节中的某个音素构建查询上下文
    """

    def __init__(self, predictors: Mapping[str, Predictor], build_context: ContextBuilder):
        self.predictors = predictors
        self.build_context = build_context

    def predict(self, phone: PhoneNode, syllable: SyllableNode, *, label: str = "") -> PredictionOutcome:
        predictor = self.predictors.get(phone.symbol)
        if predictor is None:
            debug(f"No model for phoneme {phone.symbol!r}, keeping it")
            return PredictionOutcome(phone=phone, symbols=(phone.symbol,), source="passthrough")

        try:
            context = self.build_context(phone, syllable)
            prediction = predictor.predict(context)
        except Exception as e:
            where = f"{label}, " if label else ""
            error(f"Prediction failed ({where}phone {phone.symbol!r}): {type(e).__name__}: {e}")
            raise

        symbols = split_prediction(prediction)
        debug(f"Predicted {phone.symbol!r} -> {len(symbols) if symbols else 0} phones")
        return PredictionOutcome(phone=phone, symbols=symbols, source="model")

    def iter_syllable(
        self,
        syllable: SyllableNode,
        rollup: SyllableRollup,
        *,
        label: str = "",
    ) -> Iterator[PredictionOutcome]:
        """
        按原始音素从左到右，每个音素 yield 一条结果。

        结果在 yield 之前就已写入 rollup，也就是在调用方修改树之前。
        调用方必须先应用当前结果，再取下一条。
        """
        for phone in syllable.snapshot():
            outcome = self.predict(phone, syllable, label=label)
            rollup.add(outcome.text)
            yield outcome

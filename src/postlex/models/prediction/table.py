"""
Predictor table: 音素符号 -> 预测器。

职责：
- 定义 Predictor 契约（输入上下文，输出以空格分隔的音素串）
- 持有各词共享的只读 符号 -> 预测器 映射
- 按文件名发现预测树文件，通过注入的 loader 构建映射表
  （树文件格式本身不在这里处理）

预测器对一个查询上下文只返回概率最高的一条输出音素序列：
"a b"（音素之间单个空格），或 ""（删除该音素）。
"""
import json
import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Protocol, runtime_checkable

from postlex.utils.logger import get_logger

logger = get_logger("trees")


@runtime_checkable
class Predictor(Protocol):
    def predict(self, context: Any) -> str:
        ...


class StaticPredictor:
    """Predictor that ignores its context and always returns the same string."""

    def __init__(self, output: str):
        self.output = output

    def predict(self, context: Any) -> str:
        return self.output

    def __repr__(self) -> str:
        return f"StaticPredictor({self.output!r})"


class PredictorTable(Mapping[str, Predictor]):
    """
    Immutable mapping from phoneme symbol to predictor.

    Lookups are exact symbol matches. Construct it once at startup and share it
    across words; nothing mutates it afterwards.
    """

    def __init__(self, predictors: Optional[Mapping[str, Predictor]] = None):
        self._predictors = MappingProxyType(dict(predictors or {}))

    def __getitem__(self, symbol: str) -> Predictor:
        return self._predictors[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._predictors)

    def __len__(self) -> int:
        return len(self._predictors)

    def __repr__(self) -> str:
        return f"PredictorTable({sorted(self._predictors)})"


def discover_tree_files(
    tree_dir: str | Path,
    pattern: str = r"^prediction_(.*)\.tree$",
) -> Dict[str, Path]:
    """
    Find prediction tree files in tree_dir.

    Args:
        tree_dir: directory to scan (not recursive)
        pattern: file name regex; group(1) is the phoneme key

    Returns:
        {phoneme_key: path}, in file name order
    """
    tree_dir = Path(tree_dir)
    if not tree_dir.is_dir():
        raise FileNotFoundError(f"Prediction tree directory not found: {tree_dir}")

    file_pattern = re.compile(pattern)
    found: Dict[str, Path] = {}
    for path in sorted(tree_dir.iterdir()):
        if not path.is_file():
            continue
        match = file_pattern.match(path.name)
        if match:
            found[match.group(1)] = path
        else:
            logger.debug(f"Ignoring {path.name}: not a prediction tree file")
    return found


def load_predictor_table(
    tree_dir: str | Path,
    loader: Callable[[Path], Predictor],
    *,
    pattern: str = r"^prediction_(.*)\.tree$",
    symbol_map: Optional[Mapping[str, str]] = None,
) -> PredictorTable:
    """
    Build a PredictorTable from the tree files in tree_dir.

    Args:
        tree_dir: directory holding prediction_<key>.tree files
        loader: builds a predictor from one file
        pattern: file name regex; group(1) is the phoneme key
        symbol_map: maps file keys to phoneme symbols, for trees named by
            numeric feature id instead of symbol (None = key is the symbol)

    Returns:
        PredictorTable
    """
    predictors: Dict[str, Predictor] = {}
    for key, path in discover_tree_files(tree_dir, pattern).items():
        if symbol_map is not None:
            if key not in symbol_map:
                raise KeyError(f"No phoneme symbol for tree key {key!r} ({path.name})")
            symbol = symbol_map[key]
        else:
            symbol = key
        predictors[symbol] = loader(path)
        logger.debug(f"Read in tree for phoneme {symbol!r} from {path.name}")

    logger.info(f"Loaded {len(predictors)} prediction trees from {tree_dir}")
    return PredictorTable(predictors)


def load_static_table(json_path: str | Path) -> PredictorTable:
    """
    Build a table of StaticPredictors from a JSON object {"phone": "prediction"}.
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Predictor table file not found: {json_path}")

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Predictor table must be a JSON object: {json_path}")

    predictors = {}
    for symbol, output in data.items():
        if not isinstance(output, str):
            raise ValueError(f"Prediction for {symbol!r} must be a string, got {type(output).__name__}")
        predictors[symbol] = StaticPredictor(output)

    logger.info(f"Loaded static predictor table: {len(predictors)} entries from {json_path}")
    return PredictorTable(predictors)

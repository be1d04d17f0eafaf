"""
Pronunciation Processor: 后词汇（post-lexical）发音模型（唯一对外入口）

职责：
- 把每个词的扁平 transcription 展开为音节和音素树
- 执行可选的后词汇规则（树有改动时整词重新 rollup）
- 逐音素查询预测器，按预测结果改写树（inline rollup）
- 返回 ProcessorResult（不负责文件 IO）

单词流程：
    parse -> rules（可选）-> predictive pass（配置了 predictors 才执行）
    -> 词的 transcription 只写一次

协作者由调用方注入，整个 run 期间只读：
- segment(syllable_text) -> 音素符号列表
- predictors: PredictorTable（None = 没有模型集，跳过 predictive pass）
- build_context(phone, syllable) -> 查询上下文
- apply_rules(word) -> bool
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from postlex.config.settings import DEFAULT_CONTEXT_BUILDER, PronunciationConfig
from postlex.models.prediction import (
    ContextBuilder,
    Predictor,
    get_context_builder,
    load_predictor_table,
)
from postlex.schema import WordNode
from postlex.utils.logger import error, info

from .._types import ProcessorResult
from .edit import EditKind, apply_prediction
from .errors import MalformedTranscriptionError
from .parse import Segmenter, create_substructure
from .predict import PredictionDispatcher, PredictionOutcome
from .rollup import SyllableRollup, WordRollup, update_transcriptions_from_phones
from .rules import RuleHook
from .segment import whitespace_segment


@dataclass
class PronunciationStats:
    """一次 run 累计的计数。"""
    words: int = 0
    syllables: int = 0
    phones_in: int = 0
    phones_out: int = 0
    predicted: int = 0
    passthrough: int = 0
    deleted: int = 0
    inserted: int = 0
    substituted: int = 0
    rules_changed: int = 0
    missing_models: Set[str] = field(default_factory=set)

    def count_outcome(self, outcome: PredictionOutcome, kind: EditKind) -> None:
        if outcome.source == "passthrough":
            self.passthrough += 1
            self.missing_models.add(outcome.phone.symbol)
        else:
            self.predicted += 1
        if kind is EditKind.DELETED:
            self.deleted += 1
        elif kind is EditKind.INSERTED:
            self.inserted += 1
        elif kind is EditKind.SUBSTITUTED:
            self.substituted += 1

    def to_metrics(self) -> Dict[str, Any]:
        return {
            "words": self.words,
            "syllables": self.syllables,
            "phones_in": self.phones_in,
            "phones_out": self.phones_out,
            "predicted": self.predicted,
            "passthrough": self.passthrough,
            "deleted": self.deleted,
            "inserted": self.inserted,
            "substituted": self.substituted,
            "rules_changed": self.rules_changed,
            "missing_models": sorted(self.missing_models),
        }


class PronunciationModel:
    """
    一次 run 使用的后词汇发音模型。

    逐词处理，原地修改。任何失败都会中止当前词并向上抛出；该词可能已被
    部分修改，需要原子性的调用方请自行保留副本。
    """

    def __init__(
        self,
        segment: Segmenter,
        predictors: Optional[Mapping[str, Predictor]] = None,
        build_context: Optional[ContextBuilder] = None,
        apply_rules: Optional[RuleHook] = None,
        *,
        rollup_after_parse: bool = False,
    ):
        self.segment = segment
        self.apply_rules = apply_rules
        self.rollup_after_parse = rollup_after_parse
        self.dispatcher: Optional[PredictionDispatcher] = None
        if predictors is not None:
            if build_context is None:
                build_context = get_context_builder(DEFAULT_CONTEXT_BUILDER)
            self.dispatcher = PredictionDispatcher(predictors, build_context)
        self.stats = PronunciationStats()

    @classmethod
    def from_config(
        cls,
        config: PronunciationConfig,
        segment: Segmenter = whitespace_segment,
        *,
        predictors: Optional[Mapping[str, Predictor]] = None,
        tree_loader: Optional[Callable[[Path], Predictor]] = None,
        apply_rules: Optional[RuleHook] = None,
    ) -> "PronunciationModel":
        """
        从配置构建模型。

        显式传入的 predictors 优先于 config.tree_dir；配置了 tree_dir 时必须
        提供 tree_loader（树文件格式由调用方决定）。
        """
        if predictors is None and config.tree_dir is not None:
            if tree_loader is None:
                raise ValueError(f"tree_dir is set ({config.tree_dir}) but no tree_loader was given")
            predictors = load_predictor_table(
                config.tree_dir, tree_loader, pattern=config.tree_file_pattern,
            )
        return cls(
            segment,
            predictors=predictors,
            build_context=get_context_builder(config.context_builder or DEFAULT_CONTEXT_BUILDER),
            apply_rules=apply_rules,
            rollup_after_parse=config.rollup_after_parse,
        )

    @property
    def predictive(self) -> bool:
        return self.dispatcher is not None

    def process_word(self, word: WordNode) -> WordNode:
        try:
            create_substructure(word, self.segment)
        except MalformedTranscriptionError as e:
            error(f"Malformed transcription for word {word.describe()}: {e}")
            raise

        self.stats.words += 1
        self.stats.syllables += len(word.syllables)
        self.stats.phones_in += word.phone_count()

        if self.rollup_after_parse:
            update_transcriptions_from_phones(word)

        if self.apply_rules is not None and self.apply_rules(word):
            self.stats.rules_changed += 1
            update_transcriptions_from_phones(word)

        if self.dispatcher is not None:
            self._predict_word(word)

        self.stats.phones_out += word.phone_count()
        return word

    def _predict_word(self, word: WordNode) -> None:
        word_rollup = WordRollup()
        for index, syllable in enumerate(word.syllables):
            syl_rollup = SyllableRollup(syllable.stress)
            label = f"word {word.describe()}, syllable {index}"
            for outcome in self.dispatcher.iter_syllable(syllable, syl_rollup, label=label):
                kind = apply_prediction(syllable, outcome)
                self.stats.count_outcome(outcome, kind)
            syllable.transcription = syl_rollup.text
            word_rollup.add(syllable.transcription)
        word.transcription = word_rollup.text

    def process(self, words: List[WordNode]) -> List[WordNode]:
        for word in words:
            self.process_word(word)
        return words


def run(
    words: List[WordNode],
    *,
    segment: Segmenter = whitespace_segment,
    predictors: Optional[Mapping[str, Predictor]] = None,
    build_context: Optional[ContextBuilder] = None,
    apply_rules: Optional[RuleHook] = None,
    rollup_after_parse: bool = False,
) -> ProcessorResult:
    """
    对一组词执行发音阶段。

    Args:
        words: 带 transcription、尚无音节的词；原地修改
        segment: 音节字符串 -> 音素符号
        predictors: 符号 -> 预测器（None = 跳过 predictive pass）
        build_context: 上下文构建器（None = 默认注册的构建器）
        apply_rules: 规则钩子，每个词在预测前执行一次
        rollup_after_parse: 解析后立即重写 transcription

    Returns:
        ProcessorResult:
        - data.words: 同一个词列表，已挂上音节和音素
        - metrics: 计数（见 PronunciationStats）以及 predictive_pass
    """
    model = PronunciationModel(
        segment,
        predictors=predictors,
        build_context=build_context,
        apply_rules=apply_rules,
        rollup_after_parse=rollup_after_parse,
    )
    return run_model(model, words)


def run_model(model: PronunciationModel, words: List[WordNode]) -> ProcessorResult:
    """执行已配置好的模型，参见 run()。"""
    if not model.predictive:
        info("No prediction model set configured, keeping lexical pronunciations")

    model.process(words)

    metrics = model.stats.to_metrics()
    metrics["predictive_pass"] = model.predictive

    warnings = []
    if model.predictive and metrics["missing_models"]:
        warnings.append(f"No model for phonemes: {' '.join(metrics['missing_models'])}")

    info(
        f"Pronunciation done: {metrics['words']} words, {metrics['syllables']} syllables, "
        f"{metrics['phones_in']} -> {metrics['phones_out']} phones"
    )
    return ProcessorResult(
        outputs=[],
        data={"words": words},
        metrics=metrics,
        warnings=warnings,
    )

"""
Schema: 发音阶段共享的数据契约。

职责：
- 定义 词 / 音节 / 音素 树（WordNode, SyllableNode, PhoneNode）
- 把树序列化给下一个 pipeline 阶段
- 不包含预测逻辑，不包含 rollup 逻辑

依赖规则：
- schema 可以被任何一层依赖
- schema 不能依赖 models 或 processors

This defines the word tree shared across the pronunciation stage.
It must not depend on models or processors.
"""
from .word_tree import (
    STRESS_MARKERS,
    PhoneNode,
    Stress,
    SyllableNode,
    WordNode,
)

__all__ = [
    "STRESS_MARKERS",
    "PhoneNode",
    "Stress",
    "SyllableNode",
    "WordNode",
]

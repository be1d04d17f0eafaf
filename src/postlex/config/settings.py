import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# 已加载的 .env 文件所在目录（用于解析相对路径）
_env_file_dir: Path | None = None

DEFAULT_TREE_FILE_PATTERN = r"^prediction_(.*)\.tree$"
DEFAULT_CONTEXT_BUILDER = "phone_window"


def load_env_file(env_path: str | Path | None = None) -> Path | None:
    """
    加载 .env 文件，不覆盖已存在的环境变量。

    env_path 为 None 时由 python-dotenv 从当前工作目录向上查找。
    文件不存在不算错误。

    Returns:
        实际加载的文件；没有加载任何文件时返回 None
    """
    global _env_file_dir

    if env_path is None:
        found = find_dotenv(usecwd=True)
        env_file = Path(found) if found else None
    else:
        env_file = Path(env_path) if Path(env_path).is_file() else None

    if env_file is None:
        return None

    load_dotenv(env_file, override=False)
    _env_file_dir = env_file.resolve().parent
    return env_file


def resolve_relative_path(path: str | Path) -> Path:
    """相对路径以已加载 .env 文件所在目录为基准（没有则用当前工作目录）。"""
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return ((_env_file_dir or Path.cwd()) / path).resolve()


def get_tree_dir() -> str | None:
    """
    逐音素预测树所在目录。
    环境变量：POSTLEX_TREE_DIR
    """
    return os.getenv("POSTLEX_TREE_DIR")


def get_context_builder_name() -> str | None:
    """
    预测器查询使用的上下文构建器名称。
    环境变量：POSTLEX_CONTEXT_BUILDER
    """
    return os.getenv("POSTLEX_CONTEXT_BUILDER")


@dataclass
class PronunciationConfig:
    # 预测树目录；None = 没有模型集，跳过 predictive pass
    tree_dir: str | None = None
    tree_file_pattern: str = DEFAULT_TREE_FILE_PATTERN  # group(1) 是音素 key

    # postlex.models.prediction.features 中注册的名字
    context_builder: str | None = None

    # 解析后立即重写音节/词的 transcription，早于规则和预测
    # （关闭时保留原始 transcription，直到有改动发生）
    rollup_after_parse: bool = False

    def __post_init__(self):
        """未设置的字段从环境变量读取。"""
        if self.tree_dir is None:
            self.tree_dir = get_tree_dir()
        if self.tree_dir is not None:
            self.tree_dir = str(resolve_relative_path(self.tree_dir))
        if self.context_builder is None:
            self.context_builder = get_context_builder_name() or DEFAULT_CONTEXT_BUILDER

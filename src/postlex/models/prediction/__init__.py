"""
Prediction models: predictor table and query context builders.
"""
from .features import (
    Context,
    ContextBuilder,
    get_context_builder,
    list_context_builders,
    register_context_builder,
)
from .table import (
    Predictor,
    PredictorTable,
    StaticPredictor,
    discover_tree_files,
    load_predictor_table,
    load_static_table,
)

__all__ = [
    "Context",
    "ContextBuilder",
    "get_context_builder",
    "list_context_builders",
    "register_context_builder",
    "Predictor",
    "PredictorTable",
    "StaticPredictor",
    "discover_tree_files",
    "load_predictor_table",
    "load_static_table",
]

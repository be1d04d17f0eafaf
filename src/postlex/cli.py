"""
CLI entry point for the post-lexical pronunciation stage
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List

from postlex.config.settings import PronunciationConfig, load_env_file
from postlex.models.prediction import list_context_builders, load_static_table
from postlex.pipeline.processors.pronunciation import (
    PronunciationModel,
    load_symbol_map_rules,
    run_model,
)
from postlex.schema import WordNode
from postlex.utils.atomic import atomic_write_json
from postlex.utils.logger import error, info, success, warning


def read_words(input_path: Path) -> List[WordNode]:
    """
    Read {"words": [...]} (or a bare list) of flat word objects.
    Each word needs "transcription"; "text" and "accent" are optional.
    Words that already carry "syllables" (the output form) are rejected.
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    with open(input_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    items = data.get("words") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ValueError(f"Expected a list of words in {input_path}")

    words = []
    for i, item in enumerate(items):
        if isinstance(item, dict) and item.get("syllables"):
            raise ValueError(
                f"Word {i} in {input_path} already has syllables; "
                f"input words must be flat {{text, transcription, accent}} objects"
            )
        words.append(WordNode.from_dict(item))
    return words


def main(argv: List[str] | None = None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Post-lexical pronunciation: parse, predict and rewrite word transcriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  postlex apply words.json -o out.json                    # parse only
  postlex apply words.json -o out.json --table table.json  # with predictions
  postlex builders                                         # list context builders
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    apply_parser = subparsers.add_parser("apply", help="Run the pronunciation stage on a words file")
    apply_parser.add_argument("input", type=str, help="Input JSON file ({\"words\": [...]})")
    apply_parser.add_argument("-o", "--output", type=str, required=True, help="Output JSON file")
    apply_parser.add_argument(
        "--table",
        type=str,
        help="Static predictor table JSON ({\"phone\": \"prediction\"})",
    )
    apply_parser.add_argument(
        "--rules",
        type=str,
        help="Symbol rewrite rules JSON applied before prediction",
    )
    apply_parser.add_argument(
        "--context-builder",
        type=str,
        choices=list_context_builders(),
        help="Context builder for predictor queries (default: POSTLEX_CONTEXT_BUILDER or phone_window)",
    )
    apply_parser.add_argument(
        "--rollup-after-parse",
        action="store_true",
        help="Rewrite transcriptions from the parsed phones before any edit",
    )
    apply_parser.add_argument("--env", type=str, help="Path to .env file (default: search upwards)")

    subparsers.add_parser("builders", help="List registered context builders")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "builders":
        info("Context builders:")
        for name in list_context_builders():
            info(f"  - {name}")
        return

    if args.command == "apply":
        load_env_file(args.env)
        try:
            config = PronunciationConfig(
                context_builder=args.context_builder,
                rollup_after_parse=args.rollup_after_parse,
            )
            predictors = load_static_table(args.table) if args.table else None
            if predictors is None and config.tree_dir is not None:
                warning(f"Ignoring POSTLEX_TREE_DIR={config.tree_dir}: the CLI only reads --table")
                config.tree_dir = None
            rules = load_symbol_map_rules(args.rules) if args.rules else None

            words = read_words(Path(args.input))
            model = PronunciationModel.from_config(config, predictors=predictors, apply_rules=rules)
            result = run_model(model, words)

            output_path = Path(args.output)
            atomic_write_json(
                {
                    "words": [w.to_dict() for w in result.data["words"]],
                    "metrics": result.metrics,
                },
                output_path,
            )
            for message in result.warnings:
                warning(message)
            success(f"Wrote {len(words)} words to {output_path}")

        except Exception as e:
            error(f"Pronunciation failed: {e}")
            import traceback
            traceback.print_exc()
            sys.exit(1)


if __name__ == "__main__":
    main()

"""
Post-lexical pronunciation stage for a text-to-speech front end.

Pipeline (per word):
    word transcription  "'h a - l o:"
      ↓
    parse into syllables / phones
      ↓
    (optional) post-lexical rules  -> full rollup " - "
      ↓
    (optional) per-phoneme predictors: substitute / insert / delete
      ↓
    inline rollup " -"  -> transcription handed to the next stage
"""

from .config.settings import load_env_file

__all__ = ["load_env_file"]

"""
Pipeline processors.

This module contains:
- pronunciation: post-lexical pronunciation model (parse, predict, edit, rollup)
"""

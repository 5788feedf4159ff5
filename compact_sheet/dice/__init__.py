"""
Dice Package
============
Dice/number formula values used by derived sheet stats.
"""

from compact_sheet.dice.formula import (
    FormulaValue,
    fold_formula,
    format_signed,
    has_dice,
    render_formula,
    simplify_formula,
    split_terms,
)

__all__ = [
    "FormulaValue",
    "fold_formula",
    "format_signed",
    "has_dice",
    "render_formula",
    "simplify_formula",
    "split_terms",
]

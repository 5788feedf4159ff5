"""
Dice Formula Values
===================
Parsing, classification and simplification of the dice/number expressions
that hosts store in bonus fields (e.g. "2", "1d4", "@abilities.dex.mod + 1").
Uses simpleeval for sandboxed arithmetic on the deterministic parts.

Supports:
- Arithmetic: +, -, *, /, //, %
- Functions: floor(), ceil(), max(), min(), abs(), round()
- Dice terms: 1d4, d8, 2d20kh, 1d% (any of these makes a formula random)
- Flavor text: 1d4[bless] (stripped)
- Roll data references: @abilities.dex.mod (resolved from host data)
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict
from simpleeval import InvalidExpression, simple_eval

from compact_sheet.errors import FormulaParseError

logger = logging.getLogger(__name__)

Number = Union[int, float]


# =============================================================================
# GRAMMAR
# =============================================================================

SAFE_FUNCTIONS = {
    "floor": lambda x: int(math.floor(x)),
    "ceil": lambda x: int(math.ceil(x)),
    "max": max,
    "min": min,
    "abs": abs,
    "round": round,
}

_DICE_TERM_RE = re.compile(r"(?<![a-z_])(\d*)d(\d+|%)((?:[a-z]+\d*)*)", re.I)
_FLAVOR_RE = re.compile(r"\[[^\]]*\]")
_REFERENCE_RE = re.compile(r"@([a-z_][\w.]*)", re.I)
_ALLOWED_RE = re.compile(r"^[\d\s+\-*/().,%a-z_]*$", re.I)

_EVAL_ERRORS = (
    SyntaxError,
    InvalidExpression,
    ZeroDivisionError,
    TypeError,
    ValueError,
    OverflowError,
)


# =============================================================================
# HELPERS
# =============================================================================


def _as_number(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_signed(value: Number) -> str:
    """
    Format a number with an explicit sign.

    Examples:
        3 -> "+3", 0 -> "+0", -1 -> "-1", 1.5 -> "+1.5"
    """
    value = _as_number(value)
    if isinstance(value, int):
        return f"{value:+d}"
    return f"{value:+g}"


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Number]:
    flat: Dict[str, Number] = {}
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, path))
        elif isinstance(value, bool):
            flat[path] = 1 if value else 0
        elif isinstance(value, (int, float)):
            flat[path] = value
        elif isinstance(value, str):
            try:
                flat[path] = _as_number(float(value))
            except ValueError:
                pass
    return flat


def _replace_references(text: str, roll_data: Optional[Dict[str, Any]]) -> str:
    if "@" not in text:
        return text
    flat = _flatten(roll_data or {})

    def substitute(match: re.Match) -> str:
        path = match.group(1).rstrip(".")
        if path not in flat:
            logger.warning(f"Formula reference '@{path}' not found in roll data, using 0")
            return "0"
        value = _as_number(flat[path])
        return f"({value})" if value < 0 else str(value)

    return _REFERENCE_RE.sub(substitute, text)


def _evaluate(expression: str, original: Any) -> Number:
    try:
        result = simple_eval(expression, functions=SAFE_FUNCTIONS, names={})
    except _EVAL_ERRORS as e:
        raise FormulaParseError(original, str(e) or type(e).__name__) from e
    if isinstance(result, bool) or not isinstance(result, (int, float)):
        raise FormulaParseError(original, "expression does not produce a number")
    return _as_number(result)


def has_dice(text: str) -> bool:
    return bool(_DICE_TERM_RE.search(text))


def _probe(text: str, original: Any) -> Optional[Number]:
    """
    Check that an expression is well formed.
    Returns its value when it has no dice terms, otherwise None.
    """
    if not _ALLOWED_RE.match(text):
        raise FormulaParseError(original, "unsupported characters")
    if has_dice(text):
        _evaluate(_DICE_TERM_RE.sub("1", text), original)
        return None
    return _evaluate(text, original)


def _awaits_operand(pending: str) -> bool:
    """True when a sign after `pending` is unary (e.g. "2*-1"), not a term break."""
    if not pending:
        return False
    if pending.lower().endswith("d%"):
        return False
    return pending[-1] in "*/%(,"


def split_terms(text: str, original: Any = None) -> List[Tuple[int, str]]:
    """
    Split an expression into its top-level additive terms.

    Examples:
        "+3 + 1d4 - 2" -> [(1, "3"), (1, "1d4"), (-1, "2")]
        "2*-1 + (1d4-1)" -> [(1, "2*-1"), (1, "(1d4-1)")]
    """
    original = text if original is None else original
    terms: List[Tuple[int, str]] = []
    sign, depth, buf = 1, 0, []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise FormulaParseError(original, "unbalanced parentheses")
        pending = "".join(buf).strip()
        if depth == 0 and ch in "+-" and not _awaits_operand(pending):
            if pending:
                terms.append((sign, pending))
                sign = 1
            if ch == "-":
                sign = -sign
            buf = []
            continue
        buf.append(ch)
    if depth != 0:
        raise FormulaParseError(original, "unbalanced parentheses")
    pending = "".join(buf).strip()
    if pending:
        terms.append((sign, pending))
    elif not terms or text.strip()[-1:] in ("+", "-"):
        raise FormulaParseError(original, "dangling operator" if text.strip() else "empty formula")
    return terms


# =============================================================================
# SIMPLIFICATION
# =============================================================================


def fold_formula(parts: Iterable[Union[str, Number]]) -> Tuple[Number, List[Tuple[int, str]]]:
    """
    Join parts additively and fold every constant term into one number.

    Returns:
        (constant, [(sign, symbolic_term), ...]) with symbolic terms in input order
    """
    pieces = []
    for part in parts:
        if isinstance(part, bool):
            raise FormulaParseError(part, "booleans are not formulas")
        if isinstance(part, (int, float)):
            pieces.append(f"({_as_number(part)})")
        else:
            pieces.append(_FLAVOR_RE.sub("", str(part)))
    joined = " + ".join(pieces)

    constant: Number = 0
    symbolic: List[Tuple[int, str]] = []
    for sign, term in split_terms(joined):
        term = re.sub(r"\s+", "", term).lower()
        value = _probe(term, joined)
        if value is None:
            symbolic.append((sign, term))
        else:
            constant += sign * value
    return _as_number(constant), symbolic


def render_formula(constant: Number, symbolic: List[Tuple[int, str]]) -> str:
    """Render folded terms; the leading term always carries a sign."""
    rendered = []
    if constant != 0 or not symbolic:
        rendered.append(format_signed(constant))
    for sign, term in symbolic:
        op = "+" if sign > 0 else "-"
        rendered.append(f"{op}{term}" if not rendered else f"{op} {term}")
    return " ".join(rendered)


def simplify_formula(parts: Iterable[Union[str, Number]]) -> str:
    """
    Combine formula parts into one canonical formula string.

    Examples:
        ["+3", "2"] -> "+5"
        ["+3", "1d4"] -> "+3 + 1d4"
        ["+0", "1d4 + 0"] -> "+1d4"
    """
    return render_formula(*fold_formula(parts))


# =============================================================================
# FORMULA VALUE
# =============================================================================


class FormulaValue(BaseModel):
    """
    A host-supplied number or dice expression.
    Deterministic values carry their resolved number.
    """

    model_config = ConfigDict(frozen=True)

    raw: Union[int, float, str]
    formula: str
    is_deterministic: bool
    resolved_value: Optional[Number] = None

    @classmethod
    def parse(cls, raw: Union[int, float, str], roll_data: Optional[Dict[str, Any]] = None) -> "FormulaValue":
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise FormulaParseError(raw, f"unsupported type '{type(raw).__name__}'")
        if isinstance(raw, (int, float)):
            if not math.isfinite(raw):
                raise FormulaParseError(raw, "not a finite number")
            value = _as_number(raw)
            return cls(raw=raw, formula=str(value), is_deterministic=True, resolved_value=value)

        text = _replace_references(_FLAVOR_RE.sub("", raw).strip(), roll_data)
        if not text:
            raise FormulaParseError(raw, "empty formula")

        constant, symbolic = fold_formula([text])
        if symbolic:
            formula = render_formula(constant, symbolic).lstrip("+")
            return cls(raw=raw, formula=formula, is_deterministic=False)
        return cls(raw=raw, formula=str(constant), is_deterministic=True, resolved_value=constant)

    @classmethod
    def from_host(cls, raw: Any, roll_data: Optional[Dict[str, Any]] = None) -> Optional["FormulaValue"]:
        """Parse an optional host bonus field; missing or blank means no bonus."""
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None
        return cls.parse(raw, roll_data)

    @property
    def term(self) -> Union[str, Number]:
        """The value as it should be appended to another formula."""
        if self.is_deterministic:
            return self.resolved_value
        return self.formula

    def equivalent_to(self, other: "FormulaValue") -> bool:
        """Textually equal after normalization, or resolving to the same number."""
        if self.formula == other.formula:
            return True
        return (
            self.is_deterministic
            and other.is_deterministic
            and self.resolved_value == other.resolved_value
        )

    def __str__(self):
        return self.formula

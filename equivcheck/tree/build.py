"""
Compact constructors for NodeSeq trees.

	seq(2, "x", "+", 3)                  -> 2x + 3
	seq(power(paren("x", "+", 2), 2))    -> (x+2)^2
	seq("-", frac("a", "b"))             -> -\\frac{a}{b}
	seq(fn("sin", "-", "x"))             -> \\sin(-x)

Numbers become Number, operator tokens become Operator, "-"/"+" at the
start of a term (or right after an operator) become Sign, any other
string becomes Symbol, and Node instances pass through unchanged.
"""

from __future__ import annotations
from typing import Dict, List, Sequence, Union

from .nodes import (
	Delimited, Fraction, Function, Node, NodeSeq, Number, Operator, OperatorKind,
	Polarity, Power, Root, Sign, Symbol,
)

Item = Union[Node, int, float, str]

_OPERATOR_TOKENS: Dict[str, OperatorKind] = {
	"+": OperatorKind.ADD,
	"-": OperatorKind.SUB,
	"*": OperatorKind.MUL,
	"\\times": OperatorKind.MUL,
	"\\cdot": OperatorKind.CMUL,
	"/": OperatorKind.DIV,
}


def seq(*items: Item) -> NodeSeq:
	"""Build a NodeSeq from numbers, tokens, names, and nodes."""
	out: List[Node] = []
	for item in items:
		at_term_start = len(out) == 0 or isinstance(out[-1], (Operator, Sign))
		if isinstance(item, bool):
			raise TypeError("bool is not a valid expression item")
		if isinstance(item, (int, float)):
			out.append(Number(item))
		elif isinstance(item, str):
			if item in ("-", "+") and at_term_start:
				if item == "-":
					out.append(Sign(Polarity.NEG))
				else:
					out.append(Sign(Polarity.POS))
			elif item in _OPERATOR_TOKENS:
				out.append(Operator(_OPERATOR_TOKENS[item]))
			else:
				out.append(Symbol(item))
		else:
			out.append(item)
	return tuple(out)


def _as_seq(part: Union[Item, Sequence[Item]]) -> NodeSeq:
	if isinstance(part, (list, tuple)):
		return seq(*part)
	return seq(part)


def paren(*items: Item) -> Delimited:
	return Delimited(seq(*items))


def power(base: Union[Item, Sequence[Item]], exponent: Union[Item, Sequence[Item]]) -> Power:
	return Power(_as_seq(base), _as_seq(exponent))


def frac(numerator: Union[Item, Sequence[Item]], denominator: Union[Item, Sequence[Item]]) -> Fraction:
	return Fraction(_as_seq(numerator), _as_seq(denominator))


def fn(name: str, *argument: Item) -> Function:
	return Function(name, seq(*argument))


def root(radicand: Union[Item, Sequence[Item]], index: Union[Item, Sequence[Item], None] = None) -> Root:
	if index is None:
		return Root(_as_seq(radicand))
	return Root(_as_seq(radicand), _as_seq(index))

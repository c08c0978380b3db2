"""
Trigonometric rewrite rules.

	trig-special-values   95   sin(0), cos(\\pi), ...   -> 0, -1, ...
	sin-odd               90   sin(-x)                 -> -sin(x)
	cos-even              90   cos(-x)                 -> cos(x)
	tan-identity          80   tan(x)                  -> \\frac{sin(x)}{cos(x)}

No rule rewrites sin^2 + cos^2; such pairs are left to the
fallback engine.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

import numpy as np

from equivcheck.rules.rule import KNOWN_REGIONS, Rule
from equivcheck.rules.terms import (
	SignedTerm, any_term, constant_value, replace_node, rewrite_first_term, single_negative_body,
)
from equivcheck.tree.nodes import Fraction, Function, Node, NodeSeq, Number, Symbol

ALL_REGIONS = frozenset(KNOWN_REGIONS)
PI_NAMES = ("\\pi", "pi")

# (function, angle) -> exact value; angles are "0" or "pi"
SPECIAL_VALUES: Dict[Tuple[str, str], float] = {
	("sin", "0"): 0.0,
	("cos", "0"): 1.0,
	("tan", "0"): 0.0,
	("sin", "pi"): 0.0,
	("cos", "pi"): -1.0,
	("tan", "pi"): 0.0,
}


def _special_angle(argument: NodeSeq) -> Optional[str]:
	if len(argument) == 1 and isinstance(argument[0], Symbol) and argument[0].name in PI_NAMES:
		return "pi"
	value = constant_value(argument)
	if value is None:
		return None
	if value == 0.0:
		return "0"
	if value == float(np.pi):
		return "pi"
	return None


def _special_value(node: Node) -> Optional[float]:
	if not isinstance(node, Function):
		return None
	angle = _special_angle(node.argument)
	if angle is None:
		return None
	return SPECIAL_VALUES.get((node.name, angle))


def _special_site(tree: NodeSeq) -> Optional[int]:
	for i, node in enumerate(tree):
		if _special_value(node) is not None:
			return i
	return None


def _match_special(tree: NodeSeq) -> bool:
	return _special_site(tree) is not None


def _apply_special(tree: NodeSeq) -> NodeSeq:
	i = _special_site(tree)
	if i is None:
		return tree
	return replace_node(tree, i, Number(_special_value(tree[i])))


def _sin_odd(term: SignedTerm) -> Optional[SignedTerm]:
	negative, body = term
	for j, node in enumerate(body):
		if isinstance(node, Function) and node.name == "sin":
			inner = single_negative_body(node.argument)
			if inner is not None:
				return (not negative, replace_node(body, j, Function("sin", inner)))
	return None


def _match_sin_odd(tree: NodeSeq) -> bool:
	return any_term(tree, _sin_odd)


def _apply_sin_odd(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _sin_odd)


def _cos_even_site(tree: NodeSeq) -> Optional[Tuple[int, Node]]:
	for i, node in enumerate(tree):
		if isinstance(node, Function) and node.name == "cos":
			inner = single_negative_body(node.argument)
			if inner is not None:
				return i, Function("cos", inner)
	return None


def _match_cos_even(tree: NodeSeq) -> bool:
	return _cos_even_site(tree) is not None


def _apply_cos_even(tree: NodeSeq) -> NodeSeq:
	site = _cos_even_site(tree)
	if site is None:
		return tree
	i, replacement = site
	return replace_node(tree, i, replacement)


def _tan_site(tree: NodeSeq) -> Optional[int]:
	for i, node in enumerate(tree):
		if isinstance(node, Function) and node.name == "tan":
			return i
	return None


def _match_tan(tree: NodeSeq) -> bool:
	return _tan_site(tree) is not None


def _apply_tan(tree: NodeSeq) -> NodeSeq:
	i = _tan_site(tree)
	if i is None:
		return tree
	argument = tree[i].argument
	quotient = Fraction((Function("sin", argument),), (Function("cos", argument),))
	return replace_node(tree, i, quotient)


def trig_rules() -> List[Rule]:
	"""Return the trigonometric rules in declaration order."""
	return [
		Rule("trig-special-values", 95, _match_special, _apply_special,
			"Evaluate sin, cos and tan at 0 and pi", ALL_REGIONS),
		Rule("sin-odd", 90, _match_sin_odd, _apply_sin_odd,
			"sin(-x) = -sin(x)", ALL_REGIONS),
		Rule("cos-even", 90, _match_cos_even, _apply_cos_even,
			"cos(-x) = cos(x)", ALL_REGIONS),
		Rule("tan-identity", 80, _match_tan, _apply_tan,
			"tan(x) = sin(x) / cos(x)", ALL_REGIONS),
	]

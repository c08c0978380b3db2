"""
Translation of NodeSeq trees into SymPy input syntax.

	(2, x, +, {x}^{2})        -> 2 * x + (x)**(2)
	\\frac{a}{b}               -> ((a)/(b))
	\\sin(-x)                  -> sin(- x)

Every multiplication, juxtaposition included, becomes `*`; every nested
sequence is parenthesised so the engine never has to guess precedence.
Nodes without a mapping raise TranslationError instead of being dropped.
"""

from __future__ import annotations
import keyword
import re
from typing import Dict, List

import numpy as np

from equivcheck.errors import TranslationError
from equivcheck.tree.nodes import (
	Delimited, Fraction, Function, Node, NodeSeq, Number, Operator, OperatorKind,
	Power, Root, Sign, Symbol,
)

# tree function name -> SymPy function name
FUNCTIONS: Dict[str, str] = {
	"sin": "sin", "cos": "cos", "tan": "tan",
	"sec": "sec", "csc": "csc", "cot": "cot",
	"arcsin": "asin", "arccos": "acos", "arctan": "atan",
	"asin": "asin", "acos": "acos", "atan": "atan",
	"sinh": "sinh", "cosh": "cosh", "tanh": "tanh",
	"ln": "log", "log": "log", "exp": "exp",
}

PI_NAMES = ("\\pi", "pi")

_OPERATORS: Dict[OperatorKind, str] = {
	OperatorKind.ADD: "+",
	OperatorKind.SUB: "-",
	OperatorKind.MUL: "*",
	OperatorKind.CMUL: "*",
	OperatorKind.DIV: "/",
}

_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9_]*\Z")
_RESERVED = set(FUNCTIONS) | set(FUNCTIONS.values()) | {"sqrt", "root"}


class EngineTranslator:
	"""Stateless NodeSeq -> SymPy source translator."""

	def translate(self, tree: NodeSeq) -> str:
		if not tree:
			raise TranslationError("Cannot translate an empty sequence")
		parts: List[str] = []
		prev_operand = False
		for node in tree:
			if isinstance(node, Operator):
				parts.append(_OPERATORS[node.op])
				prev_operand = False
			elif isinstance(node, Sign):
				parts.append(node.polarity.value)
				prev_operand = False
			else:
				if prev_operand:
					parts.append("*")
				parts.append(self.translate_node(node))
				prev_operand = True
		return " ".join(parts)

	def translate_node(self, node: Node) -> str:
		"""Translate one operand node."""
		if isinstance(node, Number):
			return self.number(node.value)
		if isinstance(node, Symbol):
			return self.symbol(node.name)
		if isinstance(node, Power):
			return "(" + self.translate(node.base) + ")**(" + self.translate(node.exponent) + ")"
		if isinstance(node, Fraction):
			return "((" + self.translate(node.numerator) + ")/(" + self.translate(node.denominator) + "))"
		if isinstance(node, Delimited):
			return "(" + self.translate(node.body) + ")"
		if isinstance(node, Function):
			head = FUNCTIONS.get(node.name)
			if head is None:
				raise TranslationError(f"No engine mapping for function: {node.name}")
			return head + "(" + self.translate(node.argument) + ")"
		if isinstance(node, Root):
			if node.index is None:
				return "sqrt(" + self.translate(node.radicand) + ")"
			return "root(" + self.translate(node.radicand) + ", (" + self.translate(node.index) + "))"
		raise TranslationError(f"No engine mapping for node: {type(node).__name__}")

	@staticmethod
	def number(value: float) -> str:
		if not np.isfinite(value):
			raise TranslationError(f"Non-finite number: {value}")
		if float(value).is_integer():
			text = str(int(value))
		else:
			text = repr(float(value))
		if text.startswith("-"):
			return "(" + text + ")"
		return text

	@staticmethod
	def symbol(name: str) -> str:
		if name in PI_NAMES:
			return "pi"
		bare = name.lstrip("\\")
		if not _IDENTIFIER.match(bare):
			raise TranslationError(f"Symbol is not an identifier: {name!r}")
		if bare in _RESERVED:
			raise TranslationError(f"Symbol shadows a function name: {name!r}")
		if keyword.iskeyword(bare):
			return bare + "_"
		return bare


_DEFAULT = EngineTranslator()


def translate(tree: NodeSeq) -> str:
	"""Proxy to EngineTranslator.translate."""
	return _DEFAULT.translate(tree)

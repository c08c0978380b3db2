"""
AST model: a closed union of frozen node variants and the NodeSeq tuple.

A NodeSeq is an infix-style flat sequence, e.g. (x, +, y, +, z). Every
nested sequence (power base/exponent, fraction parts, group bodies,
function arguments, root radicands) is itself a NodeSeq, which makes it
a grouping unit of its own.

Nodes are immutable; rules build new tuples, so structural equality
(==) is how the rewrite engine detects a fixpoint.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class OperatorKind(Enum):
	"""Binary infix operators. CMUL is \\cdot, MUL is \\times or *."""
	ADD = "+"
	SUB = "-"
	MUL = "\\times"
	DIV = "/"
	CMUL = "\\cdot"


class Polarity(Enum):
	"""Unary sign polarity."""
	POS = "+"
	NEG = "-"


@dataclass(frozen=True)
class Number:
	value: float

	def __post_init__(self) -> None:
		object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class Symbol:
	name: str


@dataclass(frozen=True)
class Operator:
	op: OperatorKind


@dataclass(frozen=True)
class Sign:
	polarity: Polarity


@dataclass(frozen=True)
class Power:
	base: NodeSeq
	exponent: NodeSeq

	def __post_init__(self) -> None:
		object.__setattr__(self, "base", tuple(self.base))
		object.__setattr__(self, "exponent", tuple(self.exponent))


@dataclass(frozen=True)
class Fraction:
	numerator: NodeSeq
	denominator: NodeSeq

	def __post_init__(self) -> None:
		object.__setattr__(self, "numerator", tuple(self.numerator))
		object.__setattr__(self, "denominator", tuple(self.denominator))


@dataclass(frozen=True)
class Delimited:
	"""A parenthesised group, kept until a rule flattens it."""
	body: NodeSeq

	def __post_init__(self) -> None:
		object.__setattr__(self, "body", tuple(self.body))


@dataclass(frozen=True)
class Function:
	"""Named unary function application; a leading backslash in the name is dropped."""
	name: str
	argument: NodeSeq

	def __post_init__(self) -> None:
		object.__setattr__(self, "name", self.name.lstrip("\\"))
		object.__setattr__(self, "argument", tuple(self.argument))


@dataclass(frozen=True)
class Root:
	"""Square root when index is None, n-th root otherwise."""
	radicand: NodeSeq
	index: Optional[NodeSeq] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "radicand", tuple(self.radicand))
		if self.index is not None:
			object.__setattr__(self, "index", tuple(self.index))


Node = Union[Number, Symbol, Operator, Sign, Power, Fraction, Delimited, Function, Root]
NodeSeq = Tuple[Node, ...]

ADD = Operator(OperatorKind.ADD)
SUB = Operator(OperatorKind.SUB)
MUL = Operator(OperatorKind.MUL)
DIV = Operator(OperatorKind.DIV)
CMUL = Operator(OperatorKind.CMUL)
NEG = Sign(Polarity.NEG)
POS = Sign(Polarity.POS)


def is_operand(node: Node) -> bool:
	"""Return True for every variant that can stand as a factor (not Operator, not Sign)."""
	if isinstance(node, (Operator, Sign)):
		return False
	return True


def is_operator(node: Node, *kinds: OperatorKind) -> bool:
	"""Return True if node is an Operator, optionally restricted to the given kinds."""
	if not isinstance(node, Operator):
		return False
	if not kinds:
		return True
	return node.op in kinds


def is_negative_sign(node: Node) -> bool:
	return isinstance(node, Sign) and node.polarity is Polarity.NEG


def number_value(seq: NodeSeq) -> Optional[float]:
	"""Return the value of a sequence that is exactly one Number, else None."""
	if len(seq) == 1 and isinstance(seq[0], Number):
		return seq[0].value
	return None


def children(node: Node) -> Tuple[NodeSeq, ...]:
	"""Return the child sequences of a node in a fixed order (empty for leaves)."""
	if isinstance(node, (Number, Symbol, Operator, Sign)):
		return ()
	if isinstance(node, Power):
		return (node.base, node.exponent)
	if isinstance(node, Fraction):
		return (node.numerator, node.denominator)
	if isinstance(node, Delimited):
		return (node.body,)
	if isinstance(node, Function):
		return (node.argument,)
	if isinstance(node, Root):
		if node.index is None:
			return (node.radicand,)
		return (node.radicand, node.index)
	raise TypeError(f"Unsupported node: {type(node).__name__}")


def with_children(node: Node, seqs: Tuple[NodeSeq, ...]) -> Node:
	"""Rebuild a node with replacement child sequences, in the order children() returns them."""
	if isinstance(node, (Number, Symbol, Operator, Sign)):
		if seqs:
			raise ValueError(f"{type(node).__name__} takes no children")
		return node
	if isinstance(node, Power):
		return Power(seqs[0], seqs[1])
	if isinstance(node, Fraction):
		return Fraction(seqs[0], seqs[1])
	if isinstance(node, Delimited):
		return Delimited(seqs[0])
	if isinstance(node, Function):
		return Function(node.name, seqs[0])
	if isinstance(node, Root):
		if node.index is None:
			return Root(seqs[0])
		return Root(seqs[0], seqs[1])
	raise TypeError(f"Unsupported node: {type(node).__name__}")

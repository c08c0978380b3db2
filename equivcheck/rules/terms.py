"""
Term and factor views over a flat NodeSeq.

A sum is read as a list of signed terms:

	(-, 2, \\cdot, x, +, 3)  ->  [(True, (2, \\cdot, x)), (False, (3,))]

and a term body as a list of factors, each either multiplied in or divided
out. Multiplication, juxtaposition and division share one precedence level
and associate to the left, so `a / b \\cdot c` is `(a / b) \\cdot c` and
the factor list [a, /b, c] can be reordered freely as long as each factor
keeps its divisor flag.

Rules work on these views and then rebuild a NodeSeq with join_terms /
join_factors / build_sum, which always emit one fixed shape: the first
term carries a leading Sign(NEG) when negative, later terms are joined by
+ or -, and a coefficient is written `Number, \\cdot, rest` with 1 omitted.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from equivcheck.render.canonical import render, render_node
from equivcheck.tree.nodes import (
	ADD, CMUL, DIV, NEG, SUB,
	Node, NodeSeq, Number, Operator, OperatorKind, Polarity, Sign,
	is_operand, is_operator,
)

ADDITIVE = (OperatorKind.ADD, OperatorKind.SUB)
MULTIPLICATIVE = (OperatorKind.MUL, OperatorKind.CMUL)

SignedTerm = Tuple[bool, NodeSeq]


def split_terms(tree: NodeSeq) -> List[SignedTerm]:
	"""Split a sequence at its top-level + and - into (negative, body) pairs."""
	terms: List[SignedTerm] = []
	negative = False
	body: List[Node] = []
	for node in tree:
		if is_operator(node, *ADDITIVE):
			if body:
				terms.append((negative, tuple(body)))
				body = []
				negative = False
			if node.op is OperatorKind.SUB:
				negative = not negative
		elif isinstance(node, Sign) and not body:
			if node.polarity is Polarity.NEG:
				negative = not negative
		else:
			body.append(node)
	if body:
		terms.append((negative, tuple(body)))
	return terms


def join_terms(terms: List[SignedTerm]) -> NodeSeq:
	"""Inverse of split_terms, in the fixed leading-sign / infix-operator shape."""
	out: List[Node] = []
	for i, (negative, body) in enumerate(terms):
		if i == 0:
			if negative:
				out.append(NEG)
		elif negative:
			out.append(SUB)
		else:
			out.append(ADD)
		out.extend(body)
	return tuple(out)


def single_term(tree: NodeSeq) -> Optional[SignedTerm]:
	"""Return the only term of a sequence, or None when it is a sum."""
	terms = split_terms(tree)
	if len(terms) != 1:
		return None
	return terms[0]


def single_negative_body(tree: NodeSeq) -> Optional[NodeSeq]:
	"""Return the body of a sequence that is exactly one negative term, else None."""
	term = single_term(tree)
	if term is None or not term[0]:
		return None
	return term[1]


def constant_value(tree: NodeSeq) -> Optional[float]:
	"""Value of a sequence that is one (possibly negated) Number, else None."""
	term = single_term(tree)
	if term is None:
		return None
	negative, body = term
	if len(body) != 1 or not isinstance(body[0], Number):
		return None
	if negative:
		return -body[0].value
	return body[0].value


def rewrite_first_term(tree: NodeSeq, fn: Callable[[SignedTerm], Optional[SignedTerm]]) -> NodeSeq:
	"""Replace the first term `fn` accepts (fn returns None to decline) and rejoin."""
	terms = split_terms(tree)
	for i, term in enumerate(terms):
		replacement = fn(term)
		if replacement is not None:
			return join_terms(terms[:i] + [replacement] + terms[i + 1:])
	return tree


def any_term(tree: NodeSeq, fn: Callable[[SignedTerm], Optional[SignedTerm]]) -> bool:
	for term in split_terms(tree):
		if fn(term) is not None:
			return True
	return False


def replace_node(tree: NodeSeq, index: int, *nodes: Node) -> NodeSeq:
	return tree[:index] + tuple(nodes) + tree[index + 1:]


def toggle(term: SignedTerm) -> SignedTerm:
	return (not term[0], term[1])


@dataclass(frozen=True)
class Factor:
	"""One operand of a term body; divisor=True when it follows a /."""
	node: Node
	divisor: bool = False


def split_factors(body: NodeSeq) -> Tuple[bool, List[Factor]]:
	"""
	Read a term body as factors. Signs are folded into the returned parity
	flag; \\times, \\cdot and juxtaposition all multiply.
	"""
	negative = False
	factors: List[Factor] = []
	divide_next = False
	for node in body:
		if isinstance(node, Sign):
			if node.polarity is Polarity.NEG:
				negative = not negative
		elif isinstance(node, Operator):
			divide_next = node.op is OperatorKind.DIV
		else:
			factors.append(Factor(node, divide_next))
			divide_next = False
	return negative, factors


def join_factors(factors: List[Factor]) -> NodeSeq:
	"""Rebuild an explicit product; a leading divisor gets a numerator of 1."""
	out: List[Node] = []
	for f in factors:
		if f.divisor:
			if not out:
				out.append(Number(1.0))
			out.append(DIV)
		elif out:
			out.append(CMUL)
		out.append(f.node)
	if not out:
		return (Number(1.0),)
	return tuple(out)


def is_explicit_product(body: NodeSeq) -> bool:
	"""True when operands alternate with \\cdot or / only (no juxtaposition, \\times, or signs)."""
	if not body or not is_operand(body[0]):
		return False
	for i in range(1, len(body)):
		prev = body[i - 1]
		cur = body[i]
		if isinstance(cur, Sign):
			return False
		if is_operand(cur):
			if not is_operator(prev, OperatorKind.CMUL, OperatorKind.DIV):
				return False
		elif not is_operator(cur, OperatorKind.CMUL, OperatorKind.DIV) or not is_operand(prev):
			return False
	return is_operand(body[-1])


def factor_key(node: Node) -> Tuple:
	"""Numbers first by value, everything else by its rendered text."""
	if isinstance(node, Number):
		return (0, node.value, "")
	return (1, 0.0, render_node(node))


@dataclass(frozen=True)
class Term:
	"""
	A signed coefficient and a variable part. `variable` is None for a pure
	constant; two terms are like terms when their variable parts are equal.
	"""
	coefficient: float
	variable: Optional[NodeSeq]

	@staticmethod
	def from_signed(term: SignedTerm) -> Term:
		negative, body = term
		sign = -1.0 if negative else 1.0
		if body and isinstance(body[0], Number):
			lead = body[0].value
			if len(body) == 1:
				return Term(sign * lead, None)
			nxt = body[1]
			if is_operator(nxt, *MULTIPLICATIVE) and len(body) > 2:
				return Term(sign * lead, body[2:])
			if is_operand(nxt):
				return Term(sign * lead, body[1:])
		return Term(sign, body)

	def to_signed(self) -> SignedTerm:
		negative = self.coefficient < 0
		magnitude = abs(self.coefficient)
		if self.variable is None:
			return (negative, (Number(magnitude),))
		if magnitude == 1.0:
			return (negative, self.variable)
		return (negative, (Number(magnitude), CMUL) + tuple(self.variable))

	def sort_key(self) -> Tuple:
		"""Constants first by value; variable terms by rendered variable part, then coefficient."""
		if self.variable is None:
			return (0, self.coefficient, "")
		return (1, render(self.variable), self.coefficient)


def terms_of(tree: NodeSeq) -> List[Term]:
	return [Term.from_signed(t) for t in split_terms(tree)]


def build_sum(terms: List[Term]) -> NodeSeq:
	"""Rebuild a sum from Terms; the empty sum is 0."""
	if not terms:
		return (Number(0.0),)
	return join_terms([t.to_signed() for t in terms])


def merge_like_terms(terms: List[Term]) -> List[Term]:
	"""
	Sum coefficients per variable part, keeping first-seen order, and drop
	groups whose coefficient sums to exactly zero.
	"""
	order: List[Optional[NodeSeq]] = []
	sums: Dict[Optional[NodeSeq], float] = {}
	for t in terms:
		if t.variable not in sums:
			order.append(t.variable)
			sums[t.variable] = 0.0
		sums[t.variable] += t.coefficient
	return [Term(sums[v], v) for v in order if sums[v] != 0.0]

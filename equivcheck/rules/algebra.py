"""
Algebraic rewrite rules.

Each rule is a match/transform pair over one whole NodeSeq. The engine has
already canonicalized every child sequence by the time a rule sees a tree,
so rules only look at the top level of the sequence they are given.

	flatten-addition           100   x + (y + z)        -> x + y + z
	drop-positive-sign          98   +x                 -> x
	simplify-double-negative    95   -(-x), x - -y      -> x, x + y
	combine-constants           90   2 + 3, 10 / 2      -> 5
	absorb-numeric-divisor      88   x / 2              -> 0.5 \\cdot x
	normalize-fraction-signs    85   \\frac{x}{-2}      -> -\\frac{x}{2}
	hoist-factor-signs          84   x \\cdot -y        -> -x \\cdot y
	unwrap-product-group        82   2 \\cdot (x / y)   -> 2 \\cdot x / y
	sort-addition-terms         80   x + 2              -> 2 + x
	combine-like-terms          75   2x + 3x            -> 5 \\cdot x
	explicit-multiplication     70   2x, 2 \\times x    -> 2 \\cdot x
	sort-factors                65   x \\cdot 2         -> 2 \\cdot x
	fold-powers                 62   x^1, x^0, 2^3      -> x, 1, 8
	expand-binomial-square      60   (a + b)^2          -> a^2 + 2ab + b^2
	fraction-to-quotient        55   \\frac{a}{b}       -> (a) / (b)
"""

from __future__ import annotations
from typing import List, Optional, Tuple

import numpy as np

from equivcheck.rules.rule import KNOWN_REGIONS, Rule
from equivcheck.rules.terms import (
	ADDITIVE, Factor, SignedTerm, Term,
	any_term, build_sum, constant_value, factor_key, is_explicit_product, join_factors,
	join_terms, merge_like_terms, replace_node, rewrite_first_term, single_negative_body,
	single_term, split_factors, split_terms, terms_of,
)
from equivcheck.tree.nodes import (
	ADD, CMUL, DIV,
	Delimited, Fraction, Node, NodeSeq, Number, OperatorKind, Polarity, Power, Sign,
	is_negative_sign, is_operand, is_operator,
)

ALL_REGIONS = frozenset(KNOWN_REGIONS)
MAX_FOLDED_EXPONENT = 64


def _finite(value: float) -> bool:
	return bool(np.isfinite(value))


# flatten-addition

def _flatten_term(term: SignedTerm) -> Optional[List[SignedTerm]]:
	negative, body = term
	if len(body) != 1 or not isinstance(body[0], Delimited):
		return None
	return [(negative != inner_neg, inner) for inner_neg, inner in split_terms(body[0].body)]


def _match_flatten(tree: NodeSeq) -> bool:
	for term in split_terms(tree):
		if _flatten_term(term) is not None:
			return True
	return False


def _apply_flatten(tree: NodeSeq) -> NodeSeq:
	out: List[SignedTerm] = []
	for term in split_terms(tree):
		spliced = _flatten_term(term)
		if spliced is None:
			out.append(term)
		else:
			out.extend(spliced)
	if not out:
		return (Number(0.0),)
	return join_terms(out)


# drop-positive-sign

def _is_positive_sign(node: Node) -> bool:
	return isinstance(node, Sign) and node.polarity is Polarity.POS


def _match_positive_sign(tree: NodeSeq) -> bool:
	return any(_is_positive_sign(n) for n in tree)


def _apply_positive_sign(tree: NodeSeq) -> NodeSeq:
	return tuple(n for n in tree if not _is_positive_sign(n))


# simplify-double-negative

def _double_negative_at(tree: NodeSeq, i: int) -> Optional[Tuple[Node, ...]]:
	"""Replacement for the two nodes starting at i, or None when they are not a double negative."""
	if i + 1 >= len(tree):
		return None
	node = tree[i]
	nxt = tree[i + 1]
	if is_negative_sign(node) and is_negative_sign(nxt):
		return ()
	if is_operator(node, OperatorKind.SUB) and is_negative_sign(nxt):
		return (ADD,)
	if is_negative_sign(node) and isinstance(nxt, Delimited):
		inner = single_negative_body(nxt.body)
		if inner is not None:
			return (Delimited(inner),)
	return None


def _match_double_negative(tree: NodeSeq) -> bool:
	return any(_double_negative_at(tree, i) is not None for i in range(len(tree)))


def _apply_double_negative(tree: NodeSeq) -> NodeSeq:
	out: List[Node] = []
	i = 0
	while i < len(tree):
		replacement = _double_negative_at(tree, i)
		if replacement is None:
			out.append(tree[i])
			i += 1
		else:
			out.extend(replacement)
			i += 2
	return tuple(out)


# combine-constants

def _fold_triple(tree: NodeSeq, i: int) -> Optional[float]:
	"""
	Fold `Number op Number` at i when operator precedence allows it: a sum
	only between whole terms, a product or quotient unless the left operand
	is itself a divisor.
	"""
	left = tree[i]
	op = tree[i + 1]
	right = tree[i + 2]
	if not (isinstance(left, Number) and is_operator(op) and isinstance(right, Number)):
		return None
	before = tree[i - 1] if i > 0 else None
	after = tree[i + 3] if i + 3 < len(tree) else None
	if op.op in ADDITIVE:
		if before is not None and not is_operator(before, OperatorKind.ADD):
			return None
		if after is not None and not is_operator(after, *ADDITIVE):
			return None
		if op.op is OperatorKind.ADD:
			value = left.value + right.value
		else:
			value = left.value - right.value
	else:
		if before is not None and is_operator(before, OperatorKind.DIV):
			return None
		if op.op is OperatorKind.DIV:
			if right.value == 0:
				return None
			value = left.value / right.value
		else:
			value = left.value * right.value
	if not _finite(value):
		return None
	return value


def _fold_fraction(node: Node) -> Optional[float]:
	if not isinstance(node, Fraction):
		return None
	numerator = constant_value(node.numerator)
	denominator = constant_value(node.denominator)
	if numerator is None or denominator is None or denominator == 0:
		return None
	value = numerator / denominator
	if not _finite(value):
		return None
	return value


def _constant_site(tree: NodeSeq) -> Optional[Tuple[int, int, float]]:
	for i, node in enumerate(tree):
		value = _fold_fraction(node)
		if value is not None:
			return i, i + 1, value
		if i + 2 < len(tree):
			value = _fold_triple(tree, i)
			if value is not None:
				return i, i + 3, value
	return None


def _match_constants(tree: NodeSeq) -> bool:
	return _constant_site(tree) is not None


def _apply_constants(tree: NodeSeq) -> NodeSeq:
	site = _constant_site(tree)
	if site is None:
		return tree
	start, end, value = site
	return tree[:start] + (Number(value),) + tree[end:]


# absorb-numeric-divisor

def _absorb_divisor(term: SignedTerm) -> Optional[SignedTerm]:
	negative, body = term
	for j in range(1, len(body) - 1):
		if not is_operator(body[j], OperatorKind.DIV):
			continue
		divisor = body[j + 1]
		if not isinstance(divisor, Number) or divisor.value == 0:
			continue
		rest = body[:j] + body[j + 2:]
		if isinstance(rest[0], Number):
			value = rest[0].value / divisor.value
			absorbed = (Number(value),) + rest[1:]
		else:
			value = 1.0 / divisor.value
			absorbed = (Number(value), CMUL) + rest
		if _finite(value):
			return (negative, absorbed)
	return None


def _match_absorb(tree: NodeSeq) -> bool:
	return any_term(tree, _absorb_divisor)


def _apply_absorb(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _absorb_divisor)


# normalize-fraction-signs

def _fraction_sign(term: SignedTerm) -> Optional[SignedTerm]:
	negative, body = term
	for j, node in enumerate(body):
		if isinstance(node, Fraction):
			numerator = single_negative_body(node.numerator)
			denominator = single_negative_body(node.denominator)
			if numerator is None and denominator is None:
				continue
			flips = 0
			if numerator is None:
				numerator = node.numerator
			else:
				flips += 1
			if denominator is None:
				denominator = node.denominator
			else:
				flips += 1
			if flips == 1:
				negative = not negative
			return (negative, replace_node(body, j, Fraction(numerator, denominator)))
		if isinstance(node, Delimited) and j > 0 and is_operator(body[j - 1], OperatorKind.DIV):
			inner = single_negative_body(node.body)
			if inner is not None:
				return (not negative, replace_node(body, j, Delimited(inner)))
	return None


def _match_fraction_signs(tree: NodeSeq) -> bool:
	return any_term(tree, _fraction_sign)


def _apply_fraction_signs(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _fraction_sign)


# hoist-factor-signs

def _hoist_signs(term: SignedTerm) -> Optional[SignedTerm]:
	negative, body = term
	if not any(isinstance(n, Sign) for n in body):
		return None
	for n in body:
		if is_negative_sign(n):
			negative = not negative
	return (negative, tuple(n for n in body if not isinstance(n, Sign)))


def _match_hoist(tree: NodeSeq) -> bool:
	return any_term(tree, _hoist_signs)


def _apply_hoist(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _hoist_signs)


# unwrap-product-group

def _unwrap_group(term: SignedTerm) -> Optional[SignedTerm]:
	"""
	Splice a parenthesised single term into the surrounding product. After a
	division only a plain product is spliced, as a chain of divisions.
	"""
	negative, body = term
	if len(body) < 2:
		return None
	for j, node in enumerate(body):
		if not isinstance(node, Delimited):
			continue
		inner = single_term(node.body)
		if inner is None:
			continue
		inner_neg, inner_body = inner
		if j > 0 and is_operator(body[j - 1], OperatorKind.DIV):
			flips, factors = split_factors(inner_body)
			if any(f.divisor for f in factors):
				continue
			spliced: List[Node] = []
			for k, f in enumerate(factors):
				if k:
					spliced.append(DIV)
				spliced.append(f.node)
			inner_neg = inner_neg != flips
		else:
			spliced = list(inner_body)
		return (negative != inner_neg, body[:j] + tuple(spliced) + body[j + 1:])
	return None


def _match_unwrap(tree: NodeSeq) -> bool:
	return any_term(tree, _unwrap_group)


def _apply_unwrap(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _unwrap_group)


# sort-addition-terms

def _sorted_terms(tree: NodeSeq) -> Optional[List[Term]]:
	terms = terms_of(tree)
	if len(terms) < 2:
		return None
	ordered = sorted(terms, key=Term.sort_key)
	if ordered == terms:
		return None
	return ordered


def _match_sort_terms(tree: NodeSeq) -> bool:
	return _sorted_terms(tree) is not None


def _apply_sort_terms(tree: NodeSeq) -> NodeSeq:
	ordered = _sorted_terms(tree)
	if ordered is None:
		return tree
	return build_sum(ordered)


# combine-like-terms

def _merged(tree: NodeSeq) -> NodeSeq:
	return build_sum(merge_like_terms(terms_of(tree)))


def _match_like_terms(tree: NodeSeq) -> bool:
	return _merged(tree) != tree


# explicit-multiplication

def _match_explicit(tree: NodeSeq) -> bool:
	for i, node in enumerate(tree):
		if is_operator(node, OperatorKind.MUL):
			return True
		if i and is_operand(node) and is_operand(tree[i - 1]):
			return True
	return False


def _apply_explicit(tree: NodeSeq) -> NodeSeq:
	out: List[Node] = []
	for node in tree:
		if is_operator(node, OperatorKind.MUL):
			out.append(CMUL)
			continue
		if out and is_operand(node) and is_operand(out[-1]):
			out.append(CMUL)
		out.append(node)
	return tuple(out)


# sort-factors

def _sort_factors(term: SignedTerm) -> Optional[SignedTerm]:
	negative, body = term
	if len(body) < 3 or not is_explicit_product(body):
		return None
	_, factors = split_factors(body)
	numerators = sorted((f for f in factors if not f.divisor), key=lambda f: factor_key(f.node))
	divisors = sorted((f for f in factors if f.divisor), key=lambda f: factor_key(f.node))
	ordered: List[Factor] = numerators + divisors
	if ordered == factors:
		return None
	return (negative, join_factors(ordered))


def _match_sort_factors(tree: NodeSeq) -> bool:
	return any_term(tree, _sort_factors)


def _apply_sort_factors(tree: NodeSeq) -> NodeSeq:
	return rewrite_first_term(tree, _sort_factors)


# fold-powers

def _fold_power(node: Node) -> Optional[Node]:
	if not isinstance(node, Power):
		return None
	base = constant_value(node.base)
	exponent = constant_value(node.exponent)
	if exponent == 1.0:
		if len(node.base) == 1:
			return node.base[0]
		return Delimited(node.base)
	if exponent == 0.0 and base != 0.0:
		return Number(1.0)
	if base == 1.0:
		return Number(1.0)
	if base is None or exponent is None:
		return None
	if not _finite(exponent) or exponent != int(exponent) or abs(exponent) > MAX_FOLDED_EXPONENT:
		return None
	if base == 0.0 and exponent < 0:
		return None
	with np.errstate(all="ignore"):
		value = float(np.power(np.float64(base), np.float64(exponent)))
	if not _finite(value):
		return None
	return Number(value)


def _power_site(tree: NodeSeq) -> Optional[Tuple[int, Node]]:
	for i, node in enumerate(tree):
		folded = _fold_power(node)
		if folded is not None:
			return i, folded
	return None


def _match_fold_powers(tree: NodeSeq) -> bool:
	return _power_site(tree) is not None


def _apply_fold_powers(tree: NodeSeq) -> NodeSeq:
	site = _power_site(tree)
	if site is None:
		return tree
	i, folded = site
	return replace_node(tree, i, folded)


# expand-binomial-square

def _expand_square(node: Node) -> Optional[Node]:
	if not isinstance(node, Power) or constant_value(node.exponent) != 2.0:
		return None
	base = node.base
	if len(base) == 1 and isinstance(base[0], Delimited):
		base = base[0].body
	terms = split_terms(base)
	if len(terms) != 2:
		return None
	(neg_a, a), (neg_b, b) = terms
	two = (Number(2.0),)
	middle = (neg_a != neg_b, (Number(2.0), CMUL) + a + (CMUL,) + b)
	return Delimited(join_terms([
		(False, (Power(a, two),)),
		middle,
		(False, (Power(b, two),)),
	]))


def _square_site(tree: NodeSeq) -> Optional[Tuple[int, Node]]:
	for i, node in enumerate(tree):
		expanded = _expand_square(node)
		if expanded is not None:
			return i, expanded
	return None


def _match_square(tree: NodeSeq) -> bool:
	return _square_site(tree) is not None


def _apply_square(tree: NodeSeq) -> NodeSeq:
	site = _square_site(tree)
	if site is None:
		return tree
	i, expanded = site
	return replace_node(tree, i, expanded)


# fraction-to-quotient

def _quotient_site(tree: NodeSeq) -> Optional[int]:
	for i, node in enumerate(tree):
		if not isinstance(node, Fraction):
			continue
		if i > 0 and is_operator(tree[i - 1], OperatorKind.DIV):
			continue
		return i
	return None


def _match_quotient(tree: NodeSeq) -> bool:
	return _quotient_site(tree) is not None


def _apply_quotient(tree: NodeSeq) -> NodeSeq:
	i = _quotient_site(tree)
	if i is None:
		return tree
	node = tree[i]
	return replace_node(tree, i, Delimited(node.numerator), DIV, Delimited(node.denominator))


def algebra_rules() -> List[Rule]:
	"""Return the algebra rules in declaration order."""
	return [
		Rule("flatten-addition", 100, _match_flatten, _apply_flatten,
			"Splice parenthesised sums into the enclosing sum", ALL_REGIONS),
		Rule("drop-positive-sign", 98, _match_positive_sign, _apply_positive_sign,
			"Remove unary plus", ALL_REGIONS),
		Rule("simplify-double-negative", 95, _match_double_negative, _apply_double_negative,
			"Cancel paired negations", ALL_REGIONS),
		Rule("combine-constants", 90, _match_constants, _apply_constants,
			"Fold arithmetic between numeric literals", ALL_REGIONS),
		Rule("absorb-numeric-divisor", 88, _match_absorb, _apply_absorb,
			"Turn division by a literal into a coefficient", ALL_REGIONS),
		Rule("normalize-fraction-signs", 85, _match_fraction_signs, _apply_fraction_signs,
			"Move signs out of numerators and denominators", ALL_REGIONS),
		Rule("hoist-factor-signs", 84, _match_hoist, _apply_hoist,
			"Move signs inside a product to the front of the term", ALL_REGIONS),
		Rule("unwrap-product-group", 82, _match_unwrap, _apply_unwrap,
			"Drop parentheses around a single term inside a product", ALL_REGIONS),
		Rule("sort-addition-terms", 80, _match_sort_terms, _apply_sort_terms,
			"Order terms: constants first, then by variable part", ALL_REGIONS),
		Rule("combine-like-terms", 75, _match_like_terms, _merged,
			"Sum coefficients of terms with equal variable parts", ALL_REGIONS),
		Rule("explicit-multiplication", 70, _match_explicit, _apply_explicit,
			"Write every product with \\cdot", ALL_REGIONS),
		Rule("sort-factors", 65, _match_sort_factors, _apply_sort_factors,
			"Order factors: numbers first, then by rendered text", ALL_REGIONS),
		Rule("fold-powers", 62, _match_fold_powers, _apply_fold_powers,
			"Evaluate trivial and numeric powers", ALL_REGIONS),
		Rule("expand-binomial-square", 60, _match_square, _apply_square,
			"Expand the square of a two-term sum", ALL_REGIONS),
		Rule("fraction-to-quotient", 55, _match_quotient, _apply_quotient,
			"Rewrite \\frac{a}{b} as (a) / (b)", ALL_REGIONS),
	]

"""
Canonical Form Renderer: deterministic serialization of a rewritten NodeSeq.

The output is a space-joined token string in a LaTeX-like notation:

	4 + 4 \\cdot x + {x}^{2}

Two structurally equal trees always render identically. Numbers within
the tolerance of an integer render as that integer; other numbers use 12
significant digits, so two float paths to 1/3 agree. Negative Number
literals are parenthesised to keep them apart from a Sign followed by a
positive literal. The string is for comparison and sort keys only and is
never parsed back.
"""

from __future__ import annotations
import numpy as np

from equivcheck.tree.nodes import (
	Delimited, Fraction, Function, Node, NodeSeq, Number, Operator, Power, Root, Sign, Symbol,
)

FLOAT_TOLERANCE = 1e-6


def format_number(value: float, tolerance: float = FLOAT_TOLERANCE) -> str:
	"""
	Format a float for canonical comparison. Values within `tolerance` of an
	integer print as that integer; every other value prints losslessly, so
	distinct floats never share a render.
	"""
	v = float(value)
	if not np.isfinite(v):
		if np.isnan(v):
			return "nan"
		if v > 0:
			return "inf"
		return "(-inf)"
	nearest = round(v)
	if v == nearest or abs(v - nearest) < tolerance:
		text = str(int(nearest))
	else:
		text = repr(v)
	if text.startswith("-"):
		return f"({text})"
	return text


class CanonicalRenderer:
	"""Stateless renderer; the tolerance only affects how numbers are printed."""

	def __init__(self, tolerance: float = FLOAT_TOLERANCE) -> None:
		if tolerance < 0:
			raise ValueError("tolerance must be non-negative")
		self.tolerance = float(tolerance)

	def render(self, tree: NodeSeq) -> str:
		"""Render a whole sequence."""
		parts = []
		for node in tree:
			parts.append(self.render_node(node))
		return " ".join(parts)

	def render_node(self, node: Node) -> str:
		"""Render a single node by dispatch on its variant."""
		if isinstance(node, Number):
			return format_number(node.value, self.tolerance)
		if isinstance(node, Symbol):
			return node.name
		if isinstance(node, Operator):
			return node.op.value
		if isinstance(node, Sign):
			return node.polarity.value
		if isinstance(node, Power):
			return "{" + self.render(node.base) + "}^{" + self.render(node.exponent) + "}"
		if isinstance(node, Fraction):
			return "\\frac{" + self.render(node.numerator) + "}{" + self.render(node.denominator) + "}"
		if isinstance(node, Delimited):
			return "(" + self.render(node.body) + ")"
		if isinstance(node, Function):
			return node.name + "(" + self.render(node.argument) + ")"
		if isinstance(node, Root):
			if node.index is None:
				return "\\sqrt{" + self.render(node.radicand) + "}"
			return "\\sqrt[" + self.render(node.index) + "]{" + self.render(node.radicand) + "}"
		raise TypeError(f"Unsupported node: {type(node).__name__}")


_DEFAULT = CanonicalRenderer()


def render(tree: NodeSeq, tolerance: float = FLOAT_TOLERANCE) -> str:
	"""Proxy to CanonicalRenderer.render (shared instance for the default tolerance)."""
	if tolerance == FLOAT_TOLERANCE:
		return _DEFAULT.render(tree)
	return CanonicalRenderer(tolerance).render(tree)


def render_node(node: Node, tolerance: float = FLOAT_TOLERANCE) -> str:
	if tolerance == FLOAT_TOLERANCE:
		return _DEFAULT.render_node(node)
	return CanonicalRenderer(tolerance).render_node(node)

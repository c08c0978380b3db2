"""
Well-formedness checks for NodeSeq trees.

Grammar: sum := term ((+|-) term)*, term := sign* factor (op? sign* factor)*.
Signs may only open a term or follow an operator; operators never open
or close a sequence and never touch each other.
"""

from __future__ import annotations
from typing import Tuple

from equivcheck.errors import MalformedTreeError
from .nodes import NodeSeq, Operator, Sign, children


def validate(tree: NodeSeq, path: str = "root") -> None:
	"""Raise MalformedTreeError describing the first grammar violation found."""
	if not isinstance(tree, tuple):
		raise MalformedTreeError(f"{path}: expected a tuple NodeSeq, got {type(tree).__name__}")
	if len(tree) == 0:
		raise MalformedTreeError(f"{path}: empty sequence")
	expect_operand = True
	for i, node in enumerate(tree):
		where = f"{path}[{i}]"
		if isinstance(node, Sign):
			if not expect_operand:
				raise MalformedTreeError(f"{where}: sign must open a term or follow an operator")
		elif isinstance(node, Operator):
			if expect_operand:
				raise MalformedTreeError(f"{where}: operator {node.op.value!r} has no left operand")
			expect_operand = True
		else:
			try:
				kids: Tuple[NodeSeq, ...] = children(node)
			except TypeError as e:
				raise MalformedTreeError(f"{where}: {e}") from e
			for k, child in enumerate(kids):
				validate(child, f"{where}.{type(node).__name__.lower()}[{k}]")
			expect_operand = False
	if expect_operand:
		raise MalformedTreeError(f"{path}: sequence ends with an operator or sign")


def is_well_formed(tree: NodeSeq) -> bool:
	try:
		validate(tree)
	except MalformedTreeError:
		return False
	return True

"""
AST model for parsed formulas.

Public API re-export:
	node variants, NodeSeq, children/with_children, builders, validate
"""

from .nodes import (
	ADD, CMUL, DIV, MUL, NEG, POS, SUB,
	Delimited, Fraction, Function, Node, NodeSeq, Number, Operator, OperatorKind,
	Polarity, Power, Root, Sign, Symbol,
	children, is_negative_sign, is_operand, is_operator, number_value, with_children,
)
from .build import frac, fn, paren, power, root, seq
from .validate import is_well_formed, validate

__all__ = [
	"ADD", "CMUL", "DIV", "MUL", "NEG", "POS", "SUB",
	"Delimited", "Fraction", "Function", "Node", "NodeSeq", "Number", "Operator", "OperatorKind",
	"Polarity", "Power", "Root", "Sign", "Symbol",
	"children", "is_negative_sign", "is_operand", "is_operator", "number_value", "with_children",
	"frac", "fn", "paren", "power", "root", "seq",
	"is_well_formed", "validate",
]

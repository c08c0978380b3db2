"""
SymPy side of the fallback: parsing translated text and the two strategies.

Runs inside the child process started by FallbackRunner.

	difference  simplify(a - b) == 0
	simplify    srepr(simplify(a)) == srepr(simplify(b))
"""

from __future__ import annotations
import re
from typing import Dict, Tuple

import sympy as sp

from equivcheck.fallback.ipc import EngineReply

DIFFERENCE = "difference"
SIMPLIFY = "simplify"
STRATEGIES = (DIFFERENCE, SIMPLIFY)

_NAMES = re.compile(r"[A-Za-z_][A-Za-z_0-9]*")


class SympyEngine:
	"""Namespace for the SymPy calls made by the fallback strategies."""

	NAMESPACE: Dict[str, object] = {
		"sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
		"sec": sp.sec, "csc": sp.csc, "cot": sp.cot,
		"asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
		"sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
		"log": sp.log, "exp": sp.exp, "sqrt": sp.sqrt, "root": sp.root,
		"pi": sp.pi,
	}

	@staticmethod
	def parse(text: str) -> sp.Expr:
		"""
		Parse translated text with a closed namespace: every identifier that is
		not a known head is bound to a real Symbol, and float literals become
		exact rationals so cancellation is exact.
		"""
		allowed = dict(SympyEngine.NAMESPACE)
		for nm in set(_NAMES.findall(text)):
			if nm not in allowed:
				allowed[nm] = sp.Symbol(nm, real=True)
		expr = sp.sympify(text, locals=allowed, rational=True)
		if not isinstance(expr, sp.Expr):
			raise ValueError("Non-expression construct is not allowed")
		return expr

	@staticmethod
	def difference_is_zero(left: str, right: str) -> bool:
		"""Return True iff simplify(left - right) is exactly zero."""
		d = sp.simplify(SympyEngine.parse(left) - SympyEngine.parse(right))
		if d == 0:
			return True
		else:
			return False

	@staticmethod
	def simplified_forms(left: str, right: str) -> Tuple[str, str]:
		"""Return srepr of each side after an independent simplify."""
		a = sp.simplify(SympyEngine.parse(left))
		b = sp.simplify(SympyEngine.parse(right))
		return sp.srepr(a), sp.srepr(b)

	@staticmethod
	def run(strategy: str, left: str, right: str) -> EngineReply:
		"""Run one strategy; engine exceptions become a failed reply."""
		if strategy not in STRATEGIES:
			return EngineReply(False, f"unknown_strategy:{strategy}")
		try:
			if strategy == DIFFERENCE:
				verdict = SympyEngine.difference_is_zero(left, right)
				return EngineReply(True, "ok", verdict, None)
			a, b = SympyEngine.simplified_forms(left, right)
			return EngineReply(True, "ok", a == b, f"{a} | {b}")
		except Exception as e:
			return EngineReply(False, f"engine_error:{e}")

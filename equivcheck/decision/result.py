"""
Typed containers returned by the decision policy.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class MethodTag(str, Enum):
	"""How a verdict was reached. ERROR means no verdict could be established."""
	CANONICALIZATION = "canonicalization"
	FALLBACK_DIFFERENCE = "fallback-difference"
	FALLBACK_SIMPLIFY = "fallback-simplify"
	ERROR = "error"


@dataclass(frozen=True)
class TraceEvent:
	"""
	Structured event for debug traces.
	"""
	kind: str
	payload: Dict[str, object]


@dataclass(frozen=True)
class EquivalenceResult:
	"""
	Verdict for one pair. `canonical` holds both rendered canonical forms when
	the fast path ran; `error` is set only for ERROR results.
	"""
	equivalent: bool
	method: MethodTag
	elapsed_ms: float
	forced: bool = False
	canonical: Optional[Tuple[str, str]] = None
	error: Optional[str] = None
	trace: Tuple[TraceEvent, ...] = ()

	@property
	def conclusive(self) -> bool:
		return self.method is not MethodTag.ERROR

	def to_dict(self) -> Dict[str, object]:
		out: Dict[str, object] = {
			"equivalent": self.equivalent,
			"method": self.method.value,
			"elapsed_ms": self.elapsed_ms,
			"forced": self.forced,
		}
		if self.canonical is not None:
			out["canonical"] = list(self.canonical)
		if self.error is not None:
			out["error"] = self.error
		return out

	@staticmethod
	def from_dict(d: Dict[str, object]) -> EquivalenceResult:
		"""Inverse of to_dict (the trace is not stored)."""
		canonical = d.get("canonical")
		return EquivalenceResult(
			equivalent=bool(d["equivalent"]),
			method=MethodTag(d["method"]),
			elapsed_ms=float(d["elapsed_ms"]),
			forced=bool(d.get("forced", False)),
			canonical=tuple(canonical) if canonical is not None else None,
			error=d.get("error"),
		)


@dataclass(frozen=True)
class ParseFailure:
	"""An input could not be parsed; no equivalence check was attempted."""
	error: str
	elapsed_ms: float
	forced: bool = False
	side: Optional[str] = None


CheckOutcome = Union[EquivalenceResult, ParseFailure]


@dataclass(frozen=True)
class StepCheck:
	"""Result of checking step `index` against step `index - 1`."""
	index: int
	result: CheckOutcome

"""
Equivalence Decision Policy.

	validate -> [forced?] -> canonicalize both -> render + compare
	         -> fallback difference -> fallback simplify

The fast path answers only when both sides reached a fixpoint and their
renders match. Anything else falls through to the SymPy strategies, which
share one time budget. A timeout or engine failure is reported as ERROR
with equivalent=False; it is never read as a verdict.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from equivcheck.decision.config import EquivalenceConfig
from equivcheck.decision.result import (
	CheckOutcome, EquivalenceResult, MethodTag, ParseFailure, StepCheck, TraceEvent,
)
from equivcheck.errors import MalformedTreeError, TranslationError
from equivcheck.fallback.engine import DIFFERENCE, SIMPLIFY
from equivcheck.fallback.ipc import EngineReply
from equivcheck.fallback.runner import TIMEOUT, FallbackRunner
from equivcheck.fallback.translate import EngineTranslator
from equivcheck.render.canonical import CanonicalRenderer
from equivcheck.rewrite.engine import RewriteEngine
from equivcheck.rules.registry import default_rule_set
from equivcheck.tree.nodes import NodeSeq
from equivcheck.tree.validate import validate

logger = logging.getLogger(__name__)

Parser = Callable[[str], NodeSeq]


class _Trace:
	"""Collects TraceEvents for one call when debug is on."""

	def __init__(self, enabled: bool) -> None:
		self.enabled = enabled
		self.events: List[TraceEvent] = []

	def add(self, kind: str, **payload: object) -> None:
		if self.enabled:
			self.events.append(TraceEvent(kind, dict(payload)))


class EquivalenceChecker:
	"""
	Orchestrates the fast canonical path and the fallback engine. Holds no
	per-call state, so one instance can serve concurrent checks.
	"""

	def __init__(self, runner: Optional[FallbackRunner] = None, translator: Optional[EngineTranslator] = None) -> None:
		self.runner = runner or FallbackRunner()
		self.translator = translator or EngineTranslator()

	def check(self, a: NodeSeq, b: NodeSeq, config: Optional[EquivalenceConfig] = None) -> EquivalenceResult:
		"""Decide whether two trees are algebraically equivalent."""
		if config is None:
			config = EquivalenceConfig()
		start = time.perf_counter()
		trace = _Trace(config.debug)
		forced = config.force_fallback
		for side, tree in (("a", a), ("b", b)):
			try:
				validate(tree)
			except MalformedTreeError as e:
				logger.debug("Malformed input %s: %s", side, e)
				trace.add("malformed", side=side, error=str(e))
				return self._result(False, MethodTag.ERROR, start, forced, trace, error=f"malformed input {side}: {e}")

		canonical = None
		if forced:
			trace.add("forced")
		else:
			verdict, canonical = self._fast_path(a, b, config, trace)
			if verdict:
				return self._result(True, MethodTag.CANONICALIZATION, start, forced, trace, canonical=canonical)
		return self._fallback(a, b, config, start, trace, canonical)

	def _fast_path(self, a: NodeSeq, b: NodeSeq, config: EquivalenceConfig, trace: _Trace) -> Tuple[bool, Tuple[str, str]]:
		"""Canonicalize both sides; True only for converged, identical renders."""
		engine = RewriteEngine(default_rule_set(config.rule_set_region), max_iterations=config.max_iterations, trace=config.debug)
		renderer = CanonicalRenderer(config.float_tolerance)
		outcomes = []
		renders = []
		for side, tree in (("a", a), ("b", b)):
			outcome = engine.canonicalize(tree)
			for step in outcome.steps:
				trace.add("rewrite", side=side, index=step.index, rule=step.rule, priority=step.priority,
					depth=step.depth, before=step.before, after=step.after)
			rendered = renderer.render(outcome.tree)
			trace.add("canonical", side=side, render=rendered, converged=outcome.converged, iterations=outcome.iterations)
			outcomes.append(outcome)
			renders.append(rendered)
		canonical = (renders[0], renders[1])
		converged = outcomes[0].converged and outcomes[1].converged
		if not converged:
			logger.debug("Rewrite did not converge; deferring to fallback")
			return False, canonical
		return renders[0] == renders[1], canonical

	def _fallback(self, a: NodeSeq, b: NodeSeq, config: EquivalenceConfig, start: float, trace: _Trace, canonical: Optional[Tuple[str, str]]) -> EquivalenceResult:
		forced = config.force_fallback
		try:
			left = self.translator.translate(a)
			right = self.translator.translate(b)
		except TranslationError as e:
			logger.debug("Translation failed: %s", e)
			trace.add("translation-error", error=str(e))
			return self._result(False, MethodTag.ERROR, start, forced, trace, canonical, error=str(e))
		trace.add("translated", a=left, b=right)

		deadline = time.perf_counter() + config.timeout_s
		reply = self._run(DIFFERENCE, left, right, deadline, trace)
		if not reply.ok:
			return self._result(False, MethodTag.ERROR, start, forced, trace, canonical, error=reply.message)
		if reply.verdict:
			return self._result(True, MethodTag.FALLBACK_DIFFERENCE, start, forced, trace, canonical)

		reply = self._run(SIMPLIFY, left, right, deadline, trace)
		if not reply.ok:
			return self._result(False, MethodTag.ERROR, start, forced, trace, canonical, error=reply.message)
		return self._result(bool(reply.verdict), MethodTag.FALLBACK_SIMPLIFY, start, forced, trace, canonical)

	def _run(self, strategy: str, left: str, right: str, deadline: float, trace: _Trace) -> EngineReply:
		remaining = deadline - time.perf_counter()
		if remaining <= 0:
			reply = EngineReply(False, TIMEOUT)
		else:
			reply = self.runner.run(strategy, left, right, remaining)
		logger.debug("Fallback %s: ok=%s message=%s verdict=%s", strategy, reply.ok, reply.message, reply.verdict)
		trace.add("fallback", strategy=strategy, ok=reply.ok, message=reply.message, verdict=reply.verdict)
		return reply

	@staticmethod
	def _result(equivalent: bool, method: MethodTag, start: float, forced: bool, trace: _Trace,
			canonical: Optional[Tuple[str, str]] = None, error: Optional[str] = None) -> EquivalenceResult:
		elapsed_ms = (time.perf_counter() - start) * 1000.0
		return EquivalenceResult(equivalent, method, elapsed_ms, forced, canonical, error, tuple(trace.events))

	def check_source(self, text_a: str, text_b: str, parser: Parser, config: Optional[EquivalenceConfig] = None) -> CheckOutcome:
		"""
		Parse both texts with `parser` and check them. A parser ValueError is
		returned as a ParseFailure, never as a not-equivalent result.
		"""
		if config is None:
			config = EquivalenceConfig()
		start = time.perf_counter()
		trees = []
		for side, text in (("a", text_a), ("b", text_b)):
			try:
				trees.append(parser(text))
			except ValueError as e:
				elapsed_ms = (time.perf_counter() - start) * 1000.0
				return ParseFailure(str(e), elapsed_ms, config.force_fallback, side)
		return self.check(trees[0], trees[1], config)

	def check_steps(self, trees: Sequence[NodeSeq], config: Optional[EquivalenceConfig] = None) -> List[StepCheck]:
		"""Check every tree against its predecessor."""
		out: List[StepCheck] = []
		for i in range(1, len(trees)):
			out.append(StepCheck(i, self.check(trees[i - 1], trees[i], config)))
		return out


_DEFAULT: Optional[EquivalenceChecker] = None


def default_checker() -> EquivalenceChecker:
	global _DEFAULT
	if _DEFAULT is None:
		_DEFAULT = EquivalenceChecker()
	return _DEFAULT


def check(a: NodeSeq, b: NodeSeq, config: Optional[EquivalenceConfig] = None) -> EquivalenceResult:
	"""Proxy to EquivalenceChecker.check on a shared default checker."""
	return default_checker().check(a, b, config)


def check_source(text_a: str, text_b: str, parser: Parser, config: Optional[EquivalenceConfig] = None) -> CheckOutcome:
	return default_checker().check_source(text_a, text_b, parser, config)


def check_steps(trees: Sequence[NodeSeq], config: Optional[EquivalenceConfig] = None) -> List[StepCheck]:
	return default_checker().check_steps(trees, config)

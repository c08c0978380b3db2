"""
Rewrite Engine: applies a RuleSet to a NodeSeq until no rule changes it.

Children are normalized before their parent, and re-normalized after every
parent rewrite, so rules only ever see canonical sub-sequences. At each
level the highest-priority rule whose transform actually changes the
sequence wins; a rule that matches but returns an equal sequence is
skipped.

The iteration cap bounds the rewrites applied to any one sequence, so a
long sum of independent sub-expressions does not exhaust it; the outcome
still reports the total number of rewrites across the tree.

The fixpoint test is structural equality on the immutable tuples, the same
way Normalizer.canonical compared srepr strings of consecutive passes.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from equivcheck.render.canonical import render
from equivcheck.rules.rule import Rule, RuleSet
from equivcheck.tree.nodes import NodeSeq, children, with_children

logger = logging.getLogger(__name__)

# per sequence; RewriteOutcome.iterations counts rewrites over the whole tree
MAX_ITERATIONS = 100
MAX_DEPTH = 64


@dataclass(frozen=True)
class RewriteStep:
	"""One applied rewrite, with rendered subtrees for tracing."""
	index: int
	rule: str
	priority: int
	depth: int
	before: str
	after: str


@dataclass(frozen=True)
class RewriteOutcome:
	tree: NodeSeq
	converged: bool
	iterations: int
	steps: Tuple[RewriteStep, ...] = ()


class _Rewrite:
	"""Per-call mutable state; the engine itself stays stateless."""

	def __init__(self, rules: Tuple[Rule, ...], max_iterations: int, max_depth: int, trace: bool) -> None:
		self.rules = rules
		self.max_iterations = max_iterations
		self.max_depth = max_depth
		self.trace = trace
		self.iterations = 0
		self.exhausted = False
		self.steps: List[RewriteStep] = []

	def fix(self, tree: NodeSeq, depth: int) -> NodeSeq:
		if self.exhausted:
			return tree
		if depth > self.max_depth:
			logger.warning("Nesting deeper than %d; rewrite stopped", self.max_depth)
			self.exhausted = True
			return tree
		cur = self._fix_children(tree, depth)
		spent = 0
		while not self.exhausted:
			nxt = self._apply_first(cur, depth, spent)
			if nxt is None:
				return cur
			spent += 1
			cur = self._fix_children(nxt, depth)
		return cur

	def _fix_children(self, tree: NodeSeq, depth: int) -> NodeSeq:
		out = []
		for node in tree:
			kids = children(node)
			if kids:
				fixed = tuple(self.fix(k, depth + 1) for k in kids)
				if fixed != kids:
					node = with_children(node, fixed)
			out.append(node)
		return tuple(out)

	def _apply_first(self, tree: NodeSeq, depth: int, spent: int) -> Optional[NodeSeq]:
		"""Apply the first rule that changes `tree`; None at a fixpoint or once `spent` reaches the cap."""
		for rule in self.rules:
			if not rule.match(tree):
				continue
			after = rule.transform(tree)
			if after == tree:
				continue
			if spent >= self.max_iterations:
				logger.warning("Iteration cap %d reached before a fixpoint (next rule: %s)", self.max_iterations, rule.name)
				self.exhausted = True
				return None
			self.iterations += 1
			if self.trace or logger.isEnabledFor(logging.DEBUG):
				before_s = render(tree)
				after_s = render(after)
				logger.debug("[%d] %s (%d) depth=%d: %s -> %s", self.iterations, rule.name, rule.priority, depth, before_s, after_s)
				if self.trace:
					self.steps.append(RewriteStep(self.iterations, rule.name, rule.priority, depth, before_s, after_s))
			return after
		return None


class RewriteEngine:
	"""Stateless rewriter over an ordered rule sequence; safe to share between threads."""

	def __init__(self, rules: Iterable[Rule], max_iterations: int = MAX_ITERATIONS, max_depth: int = MAX_DEPTH, trace: bool = False) -> None:
		if max_iterations < 0:
			raise ValueError("max_iterations must be non-negative")
		if max_depth < 1:
			raise ValueError("max_depth must be positive")
		if isinstance(rules, RuleSet):
			self.rules = rules.rules
		else:
			self.rules = RuleSet(rules).rules
		self.max_iterations = int(max_iterations)
		self.max_depth = int(max_depth)
		self.trace = bool(trace)

	def canonicalize(self, tree: NodeSeq) -> RewriteOutcome:
		"""
		Rewrite `tree` to a fixpoint. When the iteration cap or the depth limit
		stops the rewrite first, the partial tree is returned with converged=False.
		"""
		state = _Rewrite(self.rules, self.max_iterations, self.max_depth, self.trace)
		result = state.fix(tuple(tree), 0)
		return RewriteOutcome(result, not state.exhausted, state.iterations, tuple(state.steps))


def canonicalize(tree: NodeSeq, rule_set: Iterable[Rule], max_iterations: int = MAX_ITERATIONS) -> RewriteOutcome:
	return RewriteEngine(rule_set, max_iterations=max_iterations).canonicalize(tree)

from typing import Dict, List, Tuple

import pytest

from equivcheck.fallback.ipc import EngineReply
from equivcheck.render import render
from equivcheck.rewrite import RewriteEngine
from equivcheck.rules import default_rule_set


class FakeRunner:
	"""In-process stand-in for FallbackRunner with scripted replies per strategy."""

	def __init__(self, replies: Dict[str, EngineReply]) -> None:
		self.replies = replies
		self.calls: List[Tuple[str, str, str, float]] = []

	def run(self, strategy: str, left: str, right: str, timeout_s: float) -> EngineReply:
		self.calls.append((strategy, left, right, timeout_s))
		return self.replies[strategy]


@pytest.fixture
def engine() -> RewriteEngine:
	return RewriteEngine(default_rule_set())


@pytest.fixture
def canon(engine):
	"""Canonical render of a tree under the default US rule set."""
	def _canon(tree):
		outcome = engine.canonicalize(tree)
		assert outcome.converged
		return render(outcome.tree)
	return _canon

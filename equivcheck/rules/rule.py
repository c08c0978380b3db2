"""
Rule and RuleSet: named, prioritized match/transform pairs and their
immutable, priority-ordered collection.

Ordering: higher priority first; equal priorities keep declaration order
(first declared wins). The order is load-bearing because two rules can
legally match the same shape.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from equivcheck.errors import RuleConfigurationError
from equivcheck.tree.nodes import NodeSeq

KNOWN_REGIONS: Tuple[str, ...] = ("US", "UK", "EU")
DEFAULT_REGION = "US"


@dataclass(frozen=True)
class Rule:
	"""
	A stateless rewrite: `match` decides applicability on a whole NodeSeq and
	`transform` returns a new NodeSeq. An empty `regions` set means every region.
	"""
	name: str
	priority: int
	match: Callable[[NodeSeq], bool]
	transform: Callable[[NodeSeq], NodeSeq]
	description: str = ""
	regions: FrozenSet[str] = field(default_factory=frozenset)

	def applies_to(self, region: str) -> bool:
		if not self.regions:
			return True
		return region in self.regions


class RuleSet:
	"""Immutable, explicitly constructed ordered collection of rules."""

	def __init__(self, rules: Iterable[Rule], name: str = "custom", strict: bool = False) -> None:
		"""
		Order rules by descending priority with a stable sort over declaration order.
		Duplicate names are rejected; with strict=True equal priorities are rejected too.
		"""
		declared = list(rules)
		seen = set()
		for r in declared:
			if r.name in seen:
				raise RuleConfigurationError(f"Duplicate rule name: {r.name}")
			seen.add(r.name)
		ordered = sorted(enumerate(declared), key=lambda pair: (-pair[1].priority, pair[0]))
		self._rules: Tuple[Rule, ...] = tuple(r for _, r in ordered)
		self.name = name
		self.strict = strict
		if strict:
			clashes = self.collisions()
			if clashes:
				a, b, p = clashes[0]
				raise RuleConfigurationError(f"Priority collision at {p}: {a} / {b}")

	def __iter__(self) -> Iterator[Rule]:
		return iter(self._rules)

	def __len__(self) -> int:
		return len(self._rules)

	def __repr__(self) -> str:
		return f"RuleSet({self.name!r}, {len(self._rules)} rules)"

	@property
	def rules(self) -> Tuple[Rule, ...]:
		return self._rules

	def names(self) -> List[str]:
		return [r.name for r in self._rules]

	def get(self, name: str) -> Optional[Rule]:
		for r in self._rules:
			if r.name == name:
				return r
		return None

	def collisions(self) -> List[Tuple[str, str, int]]:
		"""Return (earlier, later, priority) for every adjacent pair sharing a priority."""
		out: List[Tuple[str, str, int]] = []
		for i in range(1, len(self._rules)):
			prev = self._rules[i - 1]
			cur = self._rules[i]
			if prev.priority == cur.priority:
				out.append((prev.name, cur.name, cur.priority))
		return out

	def for_region(self, region: str) -> RuleSet:
		"""Return a new RuleSet holding only the rules that apply to `region`."""
		kept = [r for r in self._rules if r.applies_to(region)]
		return RuleSet(kept, name=f"{self.name}:{region}", strict=self.strict)

	def matching(self, tree: NodeSeq) -> Iterator[Rule]:
		"""Yield the rules whose match accepts `tree`, in application order."""
		for r in self._rules:
			if r.match(tree):
				yield r

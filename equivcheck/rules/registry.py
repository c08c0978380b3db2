"""
Default rule sets, built once per region and shared read-only.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Optional

from equivcheck.errors import RuleConfigurationError
from equivcheck.rules.algebra import algebra_rules
from equivcheck.rules.rule import DEFAULT_REGION, KNOWN_REGIONS, RuleSet
from equivcheck.rules.trig import trig_rules


def resolve_region(region: Optional[str]) -> str:
	"""Map None to the default region and reject unknown tags."""
	if region is None:
		return DEFAULT_REGION
	if region not in KNOWN_REGIONS:
		raise RuleConfigurationError(f"Unknown rule set region: {region!r} (expected one of {', '.join(KNOWN_REGIONS)})")
	return region


@lru_cache(maxsize=None)
def _rule_set_for(region: str) -> RuleSet:
	base = RuleSet(algebra_rules() + trig_rules(), name="default")
	return base.for_region(region)


def default_rule_set(region: Optional[str] = None) -> RuleSet:
	"""Algebra rules followed by trig rules, filtered to `region` (US when None)."""
	return _rule_set_for(resolve_region(region))

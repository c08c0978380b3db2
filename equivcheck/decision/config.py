"""
Check configuration.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from equivcheck.render.canonical import FLOAT_TOLERANCE
from equivcheck.rewrite.engine import MAX_ITERATIONS
from equivcheck.rules.registry import resolve_region

DEFAULT_TIMEOUT_MS = 2000

# accepted spellings for from_mapping
_ALIASES: Dict[str, str] = {
	"ruleSetRegion": "rule_set_region",
	"forceFallback": "force_fallback",
	"fallbackTimeoutMs": "fallback_timeout_ms",
	"maxIterations": "max_iterations",
	"floatTolerance": "float_tolerance",
}


@dataclass(frozen=True)
class EquivalenceConfig:
	"""
	Per-call options for the decision policy. Invalid values raise ValueError
	at construction, so a config that exists is always usable.
	"""
	rule_set_region: Optional[str] = None
	force_fallback: bool = False
	fallback_timeout_ms: int = DEFAULT_TIMEOUT_MS
	debug: bool = False
	max_iterations: int = MAX_ITERATIONS
	float_tolerance: float = FLOAT_TOLERANCE

	def __post_init__(self) -> None:
		resolve_region(self.rule_set_region)
		if isinstance(self.fallback_timeout_ms, bool) or not isinstance(self.fallback_timeout_ms, (int, float)):
			raise ValueError("fallback_timeout_ms must be a number of milliseconds")
		if self.fallback_timeout_ms < 0:
			raise ValueError("fallback_timeout_ms must be non-negative")
		if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int) or self.max_iterations < 0:
			raise ValueError("max_iterations must be a non-negative integer")
		if self.float_tolerance < 0:
			raise ValueError("float_tolerance must be non-negative")

	@property
	def region(self) -> str:
		return resolve_region(self.rule_set_region)

	@property
	def timeout_s(self) -> float:
		return self.fallback_timeout_ms / 1000.0

	@property
	def bypass_cache(self) -> bool:
		"""Forced checks must neither read nor fill an external result cache."""
		return self.force_fallback

	def cache_fields(self) -> Dict[str, object]:
		"""Fields that can change a result, for cache fingerprints."""
		return {
			"region": self.region,
			"fallback_timeout_ms": self.fallback_timeout_ms,
			"max_iterations": self.max_iterations,
			"float_tolerance": self.float_tolerance,
		}

	@staticmethod
	def from_mapping(options: Mapping[str, object]) -> EquivalenceConfig:
		"""Build a config from snake_case or camelCase keys; unknown keys raise ValueError."""
		kwargs: Dict[str, object] = {}
		fields = set(EquivalenceConfig.__dataclass_fields__)
		for key, value in options.items():
			name = _ALIASES.get(key, key)
			if name not in fields:
				raise ValueError(f"Unknown config option: {key}")
			kwargs[name] = value
		return EquivalenceConfig(**kwargs)

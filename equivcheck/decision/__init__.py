"""
Equivalence Decision Policy: configuration, results, the checker, and the
cache protocol.
"""

from .config import EquivalenceConfig
from .result import CheckOutcome, EquivalenceResult, MethodTag, ParseFailure, StepCheck, TraceEvent
from .policy import EquivalenceChecker, check, check_source, check_steps, default_checker
from .cache import MemoryResultCache, ResultCache, cached_check, fingerprint

__all__ = [
	"EquivalenceConfig",
	"CheckOutcome", "EquivalenceResult", "MethodTag", "ParseFailure", "StepCheck", "TraceEvent",
	"EquivalenceChecker", "check", "check_source", "check_steps", "default_checker",
	"MemoryResultCache", "ResultCache", "cached_check", "fingerprint",
]

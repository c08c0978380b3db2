"""
equivcheck: decide whether two formula trees are algebraically equivalent.

Fast path: priority-ordered rewriting to a canonical form and string
comparison. Slow path: SymPy, in a child process, under a time budget.

	from equivcheck import check, EquivalenceConfig
	from equivcheck.tree import seq, power, paren

	check(seq(power("x", 2), "+", 4, "x", "+", 4), seq(power(paren("x", "+", 2), 2)))
"""

from .errors import (
	EquivalenceError, MalformedTreeError, ParseError, RuleConfigurationError, TranslationError,
)
from .decision import (
	CheckOutcome, EquivalenceChecker, EquivalenceConfig, EquivalenceResult, MemoryResultCache,
	MethodTag, ParseFailure, ResultCache, StepCheck, TraceEvent,
	cached_check, check, check_source, check_steps, fingerprint,
)
from .render import render
from .rewrite import RewriteEngine, RewriteOutcome, canonicalize
from .rules import Rule, RuleSet, default_rule_set

__version__ = "0.1.0"

__all__ = [
	"EquivalenceError", "MalformedTreeError", "ParseError", "RuleConfigurationError", "TranslationError",
	"CheckOutcome", "EquivalenceChecker", "EquivalenceConfig", "EquivalenceResult", "MemoryResultCache",
	"MethodTag", "ParseFailure", "ResultCache", "StepCheck", "TraceEvent",
	"cached_check", "check", "check_source", "check_steps", "fingerprint",
	"render", "RewriteEngine", "RewriteOutcome", "canonicalize",
	"Rule", "RuleSet", "default_rule_set",
]

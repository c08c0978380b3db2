"""
Rewrite rules: Rule/RuleSet, the algebra and trig rule families, and the
shared term/factor helpers they are written with.
"""

from .rule import DEFAULT_REGION, KNOWN_REGIONS, Rule, RuleSet
from .algebra import algebra_rules
from .trig import trig_rules
from .registry import default_rule_set, resolve_region

__all__ = [
	"DEFAULT_REGION", "KNOWN_REGIONS", "Rule", "RuleSet",
	"algebra_rules", "trig_rules", "default_rule_set", "resolve_region",
]

"""
Exception taxonomy shared by the tree model, rule registry, and fallback adapter.
"""

from __future__ import annotations


class EquivalenceError(Exception):
	"""Base class for every error raised by equivcheck."""


class MalformedTreeError(EquivalenceError, ValueError):
	"""A NodeSeq breaks the infix grammar (operator placement, empty child, ...)."""


class TranslationError(EquivalenceError, ValueError):
	"""A node has no mapping into the fallback engine's input syntax."""


class RuleConfigurationError(EquivalenceError, ValueError):
	"""A rule set was assembled inconsistently (duplicate names, strict priority collision)."""


class ParseError(EquivalenceError, ValueError):
	"""Raised by parser collaborators when source text cannot be turned into a NodeSeq."""

"""
Result-cache fingerprinting and the cache-aware check.

The cache itself belongs to the caller; this module only defines the key
and the read/fill protocol. Keys are the SHA-256 of a canonical JSON
document (sorted keys, fixed separators) over the raw renders of both
inputs and the config fields that can change a verdict.
"""

from __future__ import annotations
import hashlib
import json
import threading
from typing import Dict, Optional, Protocol

from equivcheck.decision.config import EquivalenceConfig
from equivcheck.decision.policy import EquivalenceChecker, default_checker
from equivcheck.decision.result import EquivalenceResult
from equivcheck.render.canonical import CanonicalRenderer
from equivcheck.tree.nodes import NodeSeq

_EXACT = CanonicalRenderer(0.0)


class ResultCache(Protocol):
	def get(self, key: str) -> Optional[EquivalenceResult]:
		...

	def put(self, key: str, result: EquivalenceResult) -> None:
		...


class MemoryResultCache:
	"""Thread-safe in-process ResultCache."""

	def __init__(self) -> None:
		self._items: Dict[str, EquivalenceResult] = {}
		self._lock = threading.Lock()

	def get(self, key: str) -> Optional[EquivalenceResult]:
		with self._lock:
			return self._items.get(key)

	def put(self, key: str, result: EquivalenceResult) -> None:
		with self._lock:
			self._items[key] = result

	def __len__(self) -> int:
		with self._lock:
			return len(self._items)


def canonical_json(o: dict) -> str:
	"""
	Return a canonical JSON string with sorted keys and fixed separators.
	"""
	return json.dumps(o, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def sha256_hex(b: bytes) -> str:
	h = hashlib.sha256()
	h.update(b)
	return h.hexdigest()


def fingerprint(a: NodeSeq, b: NodeSeq, config: Optional[EquivalenceConfig] = None) -> str:
	"""Cache key for an ordered pair under `config`. Numbers are rendered without snapping."""
	if config is None:
		config = EquivalenceConfig()
	doc = {
		"a": _EXACT.render(a),
		"b": _EXACT.render(b),
		"config": config.cache_fields(),
	}
	return sha256_hex(canonical_json(doc).encode("utf-8"))


def cached_check(cache: ResultCache, a: NodeSeq, b: NodeSeq, config: Optional[EquivalenceConfig] = None, checker: Optional[EquivalenceChecker] = None) -> EquivalenceResult:
	"""
	Check through `cache`. A forced config bypasses the cache entirely: it is
	neither consulted nor filled. ERROR results are not stored.
	"""
	if config is None:
		config = EquivalenceConfig()
	if checker is None:
		checker = default_checker()
	if config.bypass_cache:
		return checker.check(a, b, config)
	key = fingerprint(a, b, config)
	hit = cache.get(key)
	if hit is not None:
		return hit
	result = checker.check(a, b, config)
	if result.conclusive:
		cache.put(key, result)
	return result

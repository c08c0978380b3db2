from equivcheck import (
	EquivalenceChecker, EquivalenceConfig, EquivalenceResult, MemoryResultCache, MethodTag, cached_check, fingerprint,
)
from equivcheck.fallback import DIFFERENCE, SIMPLIFY, EngineReply
from equivcheck.tree import seq

from conftest import FakeRunner

A = seq(2, "x", "+", 3, "x")
B = seq(5, "x")


def make_checker(difference=True):
	runner = FakeRunner({DIFFERENCE: EngineReply(True, "ok", difference), SIMPLIFY: EngineReply(True, "ok", False)})
	return EquivalenceChecker(runner=runner), runner


def test_fingerprint_is_deterministic():
	assert fingerprint(A, B) == fingerprint(seq(2, "x", "+", 3, "x"), seq(5, "x"))
	assert len(fingerprint(A, B)) == 64


def test_fingerprint_depends_on_order_and_config():
	base = fingerprint(A, B)
	assert fingerprint(B, A) != base
	assert fingerprint(A, B, EquivalenceConfig(rule_set_region="UK")) != base
	assert fingerprint(A, B, EquivalenceConfig(fallback_timeout_ms=10)) != base
	assert fingerprint(A, seq(5.0000001, "x")) != base


def test_debug_does_not_change_fingerprint():
	assert fingerprint(A, B, EquivalenceConfig(debug=True)) == fingerprint(A, B)


def test_cached_check_fills_then_hits():
	cache = MemoryResultCache()
	checker, _ = make_checker()
	first = cached_check(cache, A, B, checker=checker)
	assert first.method is MethodTag.CANONICALIZATION
	assert len(cache) == 1
	second = cached_check(cache, A, B, checker=checker)
	assert second is first


def test_forced_check_bypasses_the_cache():
	cache = MemoryResultCache()
	config = EquivalenceConfig(force_fallback=True)
	planted = EquivalenceResult(False, MethodTag.FALLBACK_SIMPLIFY, 0.0, forced=True)
	cache.put(fingerprint(A, B, config), planted)
	checker, runner = make_checker()
	result = cached_check(cache, A, B, config, checker)
	assert result is not planted
	assert result.equivalent
	assert result.method is MethodTag.FALLBACK_DIFFERENCE
	assert len(runner.calls) == 1
	assert len(cache) == 1


def test_error_results_are_not_cached():
	cache = MemoryResultCache()
	runner = FakeRunner({DIFFERENCE: EngineReply(False, "timeout"), SIMPLIFY: EngineReply(False, "timeout")})
	checker = EquivalenceChecker(runner=runner)
	result = cached_check(cache, seq("x"), seq("y"), checker=checker)
	assert result.method is MethodTag.ERROR
	assert len(cache) == 0
	cached_check(cache, seq("x"), seq("y"), checker=checker)
	assert len(runner.calls) == 2


def test_fallback_verdicts_are_cached():
	cache = MemoryResultCache()
	checker, runner = make_checker(difference=False)
	result = cached_check(cache, seq("x"), seq("y"), checker=checker)
	assert result.method is MethodTag.FALLBACK_SIMPLIFY
	cached_check(cache, seq("x"), seq("y"), checker=checker)
	assert len(runner.calls) == 2
	assert len(cache) == 1

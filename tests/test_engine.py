import itertools
import logging

import pytest

from equivcheck.render import render
from equivcheck.rewrite import RewriteEngine, canonicalize
from equivcheck.rules import Rule, default_rule_set
from equivcheck.tree import Symbol, fn, frac, paren, power, root, seq


@pytest.mark.parametrize("a,b", [
	(seq(2, "x", "+", 3, "x"), seq(5, "x")),
	(seq(3, "x", "-", 3, "x"), seq(0)),
	(seq(2, "x", "+", 3, "y", "+", 4, "x"), seq(6, "x", "+", 3, "y")),
	(seq("-", paren("-", "x")), seq("x")),
	(seq("x", "/", paren("-", 2)), seq("-", paren("x", "/", 2))),
	(seq(frac("x", ["-", 2])), seq("-", paren("x", "/", 2))),
	(seq(2, "+", 3), seq(5)),
	(seq(10, "/", 2), seq(5)),
	(seq(power("x", 2), "+", 4, "x", "+", 4), seq(power(paren("x", "+", 2), 2))),
	(seq(power(paren("x", "-", 1), 2)), seq(1, "-", 2, "x", "+", power("x", 2))),
	(seq("x", "\\times", "y"), seq("y", "x")),
	(seq(frac("a", "b")), seq("a", "/", "b")),
	(seq(2, "\\cdot", paren("x", "/", 4)), seq(0.5, "x")),
	(seq("x", "\\cdot", "-", "y"), seq("-", "y", "x")),
	(seq(fn("sin", "-", "x")), seq("-", fn("sin", "x"))),
	(seq(fn("cos", "-", "x"), "+", fn("sin", 0)), seq(fn("cos", "x"))),
	(seq(fn("tan", "x")), seq(frac(fn("sin", "x"), fn("cos", "x")))),
	(seq(power(2, 3), "-", power("y", 1)), seq("-", "y", "+", 8)),
])
def test_equivalent_forms_canonicalize_identically(canon, a, b):
	assert canon(a) == canon(b)


@pytest.mark.parametrize("a,b", [
	(seq("x", "+", 1), seq("x", "+", 2)),
	(seq(2, "x"), seq(2, "y")),
	(seq("x", "/", "y"), seq("y", "/", "x")),
	(seq(power(paren("x", "+", 1), 3)), seq(power("x", 3), "+", 1)),
])
def test_different_forms_stay_different(canon, a, b):
	assert canon(a) != canon(b)


def test_expected_canonical_renders(canon):
	assert canon(seq(power(paren("x", "+", 2), 2))) == "4 + 4 \\cdot x + {x}^{2}"
	assert canon(seq(2, "x", "+", 3, "x")) == "5 \\cdot x"
	assert canon(seq("x", "/", paren("-", 2))) == "- 0.5 \\cdot x"
	assert canon(seq(10, "/", 2)) == "5"


def test_division_by_zero_is_not_folded(engine):
	out = engine.canonicalize(seq(10, "/", 0))
	assert out.converged
	assert render(out.tree) == "10 / 0"


@pytest.mark.parametrize("tree", [
	seq(power(paren("x", "+", 2), 2)),
	seq(2, "x", "+", 3, "y", "+", 4, "x"),
	seq("-", paren("-", "x")),
	seq(frac(fn("tan", "x"), ["-", 2]), "+", root("y")),
	seq(paren("a", "+", paren("b", "-", "c")), "\\cdot", 3),
	seq(10, "/", 0),
])
def test_canonicalize_is_idempotent(engine, tree):
	once = engine.canonicalize(tree)
	twice = engine.canonicalize(once.tree)
	assert once.converged and twice.converged
	assert twice.tree == once.tree
	assert twice.iterations == 0


def test_sum_permutations_render_identically(canon):
	terms = [seq(2, "x"), seq(power("y", 2)), seq(3), seq("z")]
	renders = set()
	for perm in itertools.permutations(terms):
		items = []
		for t in perm:
			if items:
				items.append("+")
			items.extend(t)
		renders.add(canon(seq(*items)))
	assert len(renders) == 1


def test_default_rules_converge_well_under_the_cap(engine):
	out = engine.canonicalize(seq(power(paren("x", "+", 2), 2), "+", power(paren("x", "-", 2), 2)))
	assert out.converged
	assert out.iterations < engine.max_iterations



def test_long_sums_of_squares_stay_within_the_cap(engine):
	items = []
	for name in "abcdefghijkl":
		if items:
			items.append("+")
		items.append(power(paren(name, "+", 1), 2))
	out = engine.canonicalize(seq(*items))
	assert out.converged
	assert "^{2}" in render(out.tree)
	assert engine.canonicalize(out.tree).iterations == 0


def _swap_rules():
	a = (Symbol("a"),)
	b = (Symbol("b"),)
	return [
		Rule("a-to-b", 10, lambda t: t == a, lambda t: b),
		Rule("b-to-a", 10, lambda t: t == b, lambda t: a),
	]


def test_rule_cycle_is_caught_by_the_iteration_cap(caplog):
	caplog.set_level(logging.WARNING, logger="equivcheck.rewrite.engine")
	out = RewriteEngine(_swap_rules(), max_iterations=25).canonicalize(seq("a"))
	assert not out.converged
	assert out.iterations == 25
	assert "Iteration cap" in caplog.text


def test_first_declared_rule_wins_a_priority_tie():
	x = (Symbol("x"),)
	rules = [
		Rule("first", 5, lambda t: t == x, lambda t: (Symbol("one"),)),
		Rule("second", 5, lambda t: t == x, lambda t: (Symbol("two"),)),
	]
	out = RewriteEngine(rules).canonicalize(x)
	assert out.tree == (Symbol("one"),)
	assert out.converged


def test_matching_rule_without_effect_falls_through():
	x = (Symbol("x"),)
	rules = [
		Rule("noop", 10, lambda t: True, lambda t: t),
		Rule("real", 1, lambda t: t == x, lambda t: (Symbol("y"),)),
	]
	out = RewriteEngine(rules).canonicalize(x)
	assert out.tree == (Symbol("y"),)
	assert out.iterations == 1
	assert out.converged


def test_children_are_rewritten_before_parents():
	seen = []

	def match(t):
		seen.append(t)
		return False

	rules = [Rule("watch", 1, match, lambda t: t)]
	RewriteEngine(rules).canonicalize(seq(paren("x"), "+", 1))
	assert seen == [seq("x"), seq(paren("x"), "+", 1)]


def test_depth_limit_marks_outcome_non_converged():
	tree = seq("x")
	for _ in range(6):
		tree = seq(paren(*tree))
	out = RewriteEngine(default_rule_set(), max_depth=3).canonicalize(tree)
	assert not out.converged


def test_zero_iteration_budget():
	eng = RewriteEngine(default_rule_set(), max_iterations=0)
	assert not eng.canonicalize(seq(2, "+", 3)).converged
	assert eng.canonicalize(seq("x")).converged


def test_trace_records_steps():
	out = RewriteEngine(default_rule_set(), trace=True).canonicalize(seq(2, "x", "+", 3, "x"))
	first = out.steps[0]
	assert first.rule == "combine-like-terms"
	assert first.priority == 75
	assert first.index == 1
	assert first.before == "2 x + 3 x"
	assert first.after == "5 \\cdot x"
	assert len(out.steps) == out.iterations


def test_no_trace_by_default(engine):
	assert engine.canonicalize(seq(2, "x", "+", 3, "x")).steps == ()


def test_module_level_canonicalize():
	out = canonicalize(seq(2, "+", 3), default_rule_set())
	assert out.tree == seq(5)


def test_invalid_engine_limits():
	with pytest.raises(ValueError):
		RewriteEngine(default_rule_set(), max_iterations=-1)
	with pytest.raises(ValueError):
		RewriteEngine(default_rule_set(), max_depth=0)

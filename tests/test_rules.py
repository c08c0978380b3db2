import pytest

from equivcheck.errors import RuleConfigurationError
from equivcheck.rules import Rule, RuleSet, algebra_rules, default_rule_set, trig_rules
from equivcheck.tree import DIV, Delimited, Number, Symbol, fn, frac, paren, power, seq


def rule(name):
	r = default_rule_set().get(name)
	assert r is not None, name
	return r


def rewrite(name, tree):
	r = rule(name)
	assert r.match(tree)
	return r.transform(tree)


def test_flatten_addition():
	assert rewrite("flatten-addition", seq("x", "+", paren("y", "+", "z"))) == seq("x", "+", "y", "+", "z")
	assert rewrite("flatten-addition", seq("x", "-", paren("y", "-", "z"))) == seq("x", "-", "y", "+", "z")
	assert not rule("flatten-addition").match(seq(2, paren("x", "+", 1)))


def test_drop_positive_sign():
	assert rewrite("drop-positive-sign", seq("+", "x")) == seq("x")


def test_double_negative():
	assert rewrite("simplify-double-negative", seq("-", "-", "x")) == seq("x")
	assert rewrite("simplify-double-negative", seq("x", "-", "-", "y")) == seq("x", "+", "y")
	assert not rule("simplify-double-negative").match(seq("-", "x"))


@pytest.mark.parametrize("tree,expected", [
	(seq(2, "+", 3), seq(5)),
	(seq(10, "/", 2), seq(5)),
	(seq(2, "\\cdot", 3), seq(6)),
	(seq(1, "+", 2, "\\cdot", 3), seq(1, "+", 6)),
	(seq(frac(6, 3)), seq(2)),
	(seq(frac(["-", 6], 3)), seq(-2)),
	(seq(6, "/", 2, "x"), seq(3, "x")),
])
def test_combine_constants(tree, expected):
	assert rewrite("combine-constants", tree) == expected


@pytest.mark.parametrize("tree", [
	seq(10, "/", 0),
	seq(frac(1, 0)),
	seq("x", "-", 2, "+", 3),
	seq(2, "+", 3, "x"),
	seq("x", "/", 2, "\\cdot", 3),
])
def test_combine_constants_respects_precedence_and_zero(tree):
	assert not rule("combine-constants").match(tree)


def test_absorb_numeric_divisor():
	assert rewrite("absorb-numeric-divisor", seq("x", "/", 2)) == seq(0.5, "\\cdot", "x")
	assert rewrite("absorb-numeric-divisor", seq(3, "x", "/", 2)) == seq(1.5, "x")
	assert not rule("absorb-numeric-divisor").match(seq("x", "/", 0))


def test_fraction_signs():
	assert rewrite("normalize-fraction-signs", seq(frac("x", ["-", 2]))) == seq("-", frac("x", 2))
	assert rewrite("normalize-fraction-signs", seq(frac(["-", "x"], ["-", "y"]))) == seq(frac("x", "y"))
	assert rewrite("normalize-fraction-signs", seq("x", "/", paren("-", "y"))) == seq("-", "x", "/", paren("y"))


def test_hoist_factor_signs():
	assert rewrite("hoist-factor-signs", seq("x", "\\cdot", "-", "y")) == seq("-", "x", "\\cdot", "y")


def test_unwrap_product_group():
	assert rewrite("unwrap-product-group", seq(2, "\\cdot", paren("x", "/", "y"))) == seq(2, "\\cdot", "x", "/", "y")
	assert rewrite("unwrap-product-group", seq("x", "/", paren("y", "z"))) == seq("x", "/", "y", "/", "z")
	assert not rule("unwrap-product-group").match(seq("x", "/", paren("y", "/", "z")))
	assert not rule("unwrap-product-group").match(seq(2, paren("x", "+", 1)))


def test_sort_addition_terms():
	assert rewrite("sort-addition-terms", seq("x", "+", 2)) == seq(2, "+", "x")
	assert rewrite("sort-addition-terms", seq("y", "+", "x")) == seq("x", "+", "y")
	assert not rule("sort-addition-terms").match(seq(2, "+", "x"))


def test_combine_like_terms():
	assert rewrite("combine-like-terms", seq(2, "x", "+", 3, "x")) == seq(5, "\\cdot", "x")
	assert rewrite("combine-like-terms", seq(3, "x", "-", 3, "x")) == seq(0)
	assert rewrite("combine-like-terms", seq("x", "+", "x")) == seq(2, "\\cdot", "x")
	assert not rule("combine-like-terms").match(seq(5, "\\cdot", "x"))


def test_explicit_multiplication():
	assert rewrite("explicit-multiplication", seq(2, "x")) == seq(2, "\\cdot", "x")
	assert rewrite("explicit-multiplication", seq(2, "\\times", "x")) == seq(2, "\\cdot", "x")
	assert rewrite("explicit-multiplication", seq("x", "y", "z")) == seq("x", "\\cdot", "y", "\\cdot", "z")


def test_sort_factors():
	assert rewrite("sort-factors", seq("y", "\\cdot", "x", "\\cdot", 2)) == seq(2, "\\cdot", "x", "\\cdot", "y")
	assert rewrite("sort-factors", seq("x", "/", "y", "\\cdot", "z")) == seq("x", "\\cdot", "z", "/", "y")
	assert not rule("sort-factors").match(seq("y", "x"))


def test_fold_powers():
	assert rewrite("fold-powers", seq(power("x", 1))) == seq("x")
	assert rewrite("fold-powers", seq(power("x", 0))) == seq(1)
	assert rewrite("fold-powers", seq(power(2, 3))) == seq(8)
	assert rewrite("fold-powers", seq(power(1, "x"))) == seq(1)
	assert not rule("fold-powers").match(seq(power(0, ["-", 1])))
	assert not rule("fold-powers").match(seq(power("x", 2)))


def test_expand_binomial_square():
	expanded = rewrite("expand-binomial-square", seq(power(paren("a", "+", "b"), 2)))
	assert expanded == (Delimited(seq(power("a", 2), "+", 2, "\\cdot", "a", "\\cdot", "b", "+", power("b", 2))),)
	expanded = rewrite("expand-binomial-square", seq(power(paren("a", "-", "b"), 2)))
	assert expanded == (Delimited(seq(power("a", 2), "-", 2, "\\cdot", "a", "\\cdot", "b", "+", power("b", 2))),)


@pytest.mark.parametrize("tree", [
	seq(power(paren("a", "+", "b"), 3)),
	seq(power(paren("a", "+", "b", "+", "c"), 2)),
	seq(power("a", 2)),
])
def test_expand_binomial_square_needs_two_terms_squared(tree):
	assert not rule("expand-binomial-square").match(tree)


def test_fraction_to_quotient():
	assert rewrite("fraction-to-quotient", seq(frac("a", "b"))) == (Delimited((Symbol("a"),)), DIV, Delimited((Symbol("b"),)))


def test_trig_special_values():
	assert rewrite("trig-special-values", seq(fn("sin", 0))) == seq(0)
	assert rewrite("trig-special-values", seq(fn("cos", 0))) == seq(1)
	assert rewrite("trig-special-values", seq(fn("cos", "\\pi"))) == (Number(-1),)
	assert rewrite("trig-special-values", seq(fn("tan", "pi"))) == seq(0)
	assert not rule("trig-special-values").match(seq(fn("sin", "x")))


def test_sin_odd_cos_even():
	assert rewrite("sin-odd", seq(fn("sin", "-", "x"))) == seq("-", fn("sin", "x"))
	assert rewrite("cos-even", seq(fn("cos", "-", "x"))) == seq(fn("cos", "x"))
	assert not rule("sin-odd").match(seq(fn("sin", "x")))


def test_tan_identity():
	assert rewrite("tan-identity", seq(fn("tan", "x"))) == seq(frac(fn("sin", "x"), fn("cos", "x")))


def test_default_rule_set_order():
	rs = default_rule_set()
	names = rs.names()
	assert names[0] == "flatten-addition"
	assert names[-1] == "fraction-to-quotient"
	assert len(rs) == len(algebra_rules()) + len(trig_rules()) == 19
	priorities = [r.priority for r in rs]
	assert priorities == sorted(priorities, reverse=True)


def test_equal_priorities_keep_declaration_order():
	rs = default_rule_set()
	assert ("simplify-double-negative", "trig-special-values", 95) in rs.collisions()
	assert ("combine-constants", "sin-odd", 90) in rs.collisions()
	assert ("sin-odd", "cos-even", 90) in rs.collisions()
	names = rs.names()
	assert names.index("sort-addition-terms") < names.index("tan-identity")


def test_strict_rule_set_rejects_collisions():
	with pytest.raises(RuleConfigurationError):
		RuleSet(algebra_rules() + trig_rules(), strict=True)
	RuleSet(algebra_rules(), strict=True)


def test_duplicate_rule_names_rejected():
	r = Rule("same", 1, lambda t: False, lambda t: t)
	with pytest.raises(RuleConfigurationError):
		RuleSet([r, Rule("same", 2, lambda t: False, lambda t: t)])


def test_regions():
	assert default_rule_set() is default_rule_set("US")
	assert len(default_rule_set("UK")) == len(default_rule_set("EU")) == 19
	with pytest.raises(ValueError):
		default_rule_set("XX")
	uk_only = Rule("uk-only", 5, lambda t: False, lambda t: t, regions=frozenset({"UK"}))
	rs = RuleSet([uk_only] + algebra_rules())
	assert rs.for_region("UK").get("uk-only") is uk_only
	assert rs.for_region("US").get("uk-only") is None


def test_matching_yields_in_application_order():
	names = [r.name for r in default_rule_set().matching(seq(2, "x", "+", 3, "x"))]
	assert names[0] == "combine-like-terms"
	assert "explicit-multiplication" in names

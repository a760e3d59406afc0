"""Tests for expression trees: evaluation, dependency queries, cleaning, rendering."""

import pytest

from symkalk_pkg.expr import (
    Binary,
    Constant,
    Variable,
    add,
    clean,
    cos,
    depends_on_any_variable,
    depends_on_variable,
    div,
    evaluate,
    operands,
    postvisitor,
    same_tree,
    exp,
    integer,
    mul,
    neg,
    one,
    power,
    real,
    sin,
    sqrt,
    sub,
    to_string,
    zero,
)
from symkalk_pkg.numeric import Numeric
from symkalk_pkg.types import DivisionByZeroError, UndefinedVariableIndexError

x = Variable(0)
y = Variable(1)


class TestEvaluation:
    """Test recursive evaluation against a value list."""

    def test_constants(self):
        values = []
        assert evaluate(add(integer(1), integer(2)), values) == Numeric.from_integer(3)
        assert evaluate(sub(integer(2), integer(3)), values) == Numeric.from_integer(-1)
        assert evaluate(mul(integer(2), integer(3)), values) == Numeric.from_integer(6)

    def test_variables(self):
        values = [Numeric.from_integer(2), Numeric.from_integer(3)]
        f = add(x, add(one(), y))
        assert evaluate(f, values) == Numeric.from_integer(6)

    def test_unary_functions(self):
        values = [Numeric.from_real(0.0)]
        assert evaluate(neg(x), values) == Numeric.from_real(-0.0)
        assert evaluate(exp(x), values) == Numeric.from_real(1.0)
        assert evaluate(cos(x), values) == Numeric.from_real(1.0)
        assert evaluate(sin(x), values) == Numeric.from_real(0.0)
        assert evaluate(sqrt(integer(9)), values) == Numeric.from_real(3.0)

    def test_power(self):
        values = [Numeric.from_integer(3)]
        assert evaluate(power(x, integer(2)), values) == Numeric.from_integer(9)

    def test_index_out_of_range(self):
        with pytest.raises(UndefinedVariableIndexError) as exc_info:
            evaluate(add(x, y), [Numeric.from_integer(1)])
        assert exc_info.value.index == 1
        assert exc_info.value.code == "UNDEFINED_VARIABLE_INDEX"

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            evaluate(div(one(), x), [Numeric.from_integer(0)])


class TestDependencies:
    def test_depends(self):
        f = add(x, add(one(), y))
        assert depends_on_any_variable(f)
        assert depends_on_variable(f, 0)
        assert depends_on_variable(f, 1)
        assert not depends_on_variable(f, 2)

    def test_constant_tree(self):
        f = mul(integer(2), sin(integer(3)))
        assert not depends_on_any_variable(f)
        assert not depends_on_variable(f, 0)


class TestClean:
    """Test the single-pass syntactic simplifier."""

    one_plus_x = add(one(), x)

    def test_untouched(self):
        assert clean(self.one_plus_x) == self.one_plus_x
        two_plus_two = add(integer(2), integer(2))
        assert clean(two_plus_two) == two_plus_two

    def test_multiplicative_identity(self):
        assert clean(mul(one(), self.one_plus_x)) == self.one_plus_x
        assert clean(mul(self.one_plus_x, real(1.0))) == self.one_plus_x

    def test_multiplicative_annihilator(self):
        assert clean(mul(zero(), self.one_plus_x)) == zero()
        assert clean(mul(self.one_plus_x, zero())) == zero()

    def test_additive_identity(self):
        assert clean(add(zero(), self.one_plus_x)) == self.one_plus_x
        assert clean(add(self.one_plus_x, real(0.0))) == self.one_plus_x

    def test_self_division(self):
        assert clean(div(self.one_plus_x, self.one_plus_x)) == one()

    def test_bottom_up(self):
        assert clean(add(mul(x, one()), zero())) == x
        assert clean(neg(mul(zero(), x))) == neg(zero())

    def test_syntactic_only(self):
        f = div(add(one(), x), add(x, one()))
        assert clean(f) == f

    def test_unchanged_subtrees_are_shared(self):
        f = add(self.one_plus_x, mul(one(), y))
        cleaned = clean(f)
        assert cleaned.lhs is self.one_plus_x

    @pytest.mark.parametrize(
        "tree",
        [
            add(zero(), mul(one(), add(x, zero()))),
            div(mul(x, one()), x),
            mul(add(zero(), zero()), y),
            power(add(x, zero()), mul(one(), integer(2))),
            sub(mul(zero(), x), mul(integer(5), one())),
            neg(div(add(y, zero()), y)),
        ],
    )
    def test_idempotent(self, tree):
        once = clean(tree)
        assert clean(once) == once


class TestRendering:
    names = ["x", "y"]

    def test_minimal_parentheses(self):
        f = add(mul(mul(integer(2), x), x), div(integer(5), x))
        assert to_string(f, self.names) == "2 * x * x + 5 / x"

    def test_grouping(self):
        assert to_string(mul(integer(32), add(x, y)), self.names) == "32 * (x + y)"
        assert to_string(sub(x, add(x, one())), self.names) == "x - (x + 1)"
        assert to_string(power(neg(x), integer(2)), self.names) == "(-x) ^ 2"
        assert to_string(sin(add(x, y)), self.names) == "sin(x + y)"

    def test_unnamed_slot(self):
        assert to_string(Variable(7), self.names) == "v7"

    def test_node_kinds(self):
        assert isinstance(add(x, y), Binary)
        assert isinstance(one(), Constant)


def chain(function, leaf, length):
    tree = leaf
    for _ in range(length - 1):
        tree = function(tree, leaf)
    return tree


class TestTraversal:
    """Walks over trees far deeper than the interpreter recursion limit."""

    def test_postvisitor_order(self):
        seen = []
        postvisitor(add(x, mul(y, one())), lambda node, *args: seen.append(node))
        assert seen == [x, y, one(), mul(y, one()), add(x, mul(y, one()))]

    def test_shared_subtree_visited_once(self):
        shared = add(x, one())
        calls = []
        postvisitor(mul(shared, shared), lambda node, *args: calls.append(node))
        assert calls.count(shared) == 1

    def test_operands(self):
        assert operands(x) == ()
        assert operands(neg(x)) == (x,)
        assert operands(add(x, y)) == (x, y)

    def test_same_tree(self):
        assert same_tree(add(x, one()), add(Variable(0), integer(1)))
        assert not same_tree(add(x, one()), add(one(), x))
        assert not same_tree(neg(x), exp(x))
        assert same_tree(chain(add, x, 1500), chain(add, x, 1500))
        assert not same_tree(chain(add, x, 1500), chain(add, y, 1500))

    def test_long_chain(self):
        f = chain(add, one(), 1500)
        assert evaluate(f, []) == Numeric.from_integer(1500)
        assert depends_on_any_variable(chain(mul, x, 1500))
        assert not depends_on_variable(chain(mul, x, 1500), 1)
        assert to_string(chain(add, x, 1500), ["x"]) == " + ".join(["x"] * 1500)

    def test_long_chain_clean(self):
        f = chain(mul, x, 1500)
        assert clean(mul(one(), f)) is f
        assert clean(chain(add, zero(), 1500)) == zero()

"""Tests for the linear expression algebra."""

import math

import numpy as np
import pytest

from mip_algebra import Constraint, ConstraintSense, LinearExpression, ObjectiveSense
from mip_algebra.algebra.expression import as_expression, format_constraint, format_expression


def var(variable_id: int) -> LinearExpression:
    return LinearExpression.from_variable(variable_id)


class TestConstruction:
    """Test cases for building expressions."""

    def test_from_variable(self):
        """A variable reference has coefficient 1 and no constant."""
        expr = var(3)
        assert expr.terms == {3: 1.0}
        assert expr.constant == 0.0

    def test_from_constant(self):
        """A constant has no terms."""
        expr = LinearExpression.from_constant(4)
        assert expr.terms == {}
        assert expr.constant == 4.0
        assert expr.is_constant

    def test_zero(self):
        """The zero expression."""
        assert LinearExpression.zero().equals(0)

    def test_exact_zero_coefficients_pruned(self):
        """Exact zeros are dropped at construction."""
        assert LinearExpression({0: 0.0, 1: 2.0}).terms == {1: 2.0}

    def test_terms_property_is_a_copy(self):
        """Mutating the returned mapping does not change the expression."""
        expr = var(0)
        expr.terms[0] = 5.0
        assert expr.coefficient(0) == 1.0

    def test_as_expression_rejects_other_types(self):
        """Only numbers and expressions can be coerced."""
        with pytest.raises(TypeError):
            as_expression("x")
        with pytest.raises(TypeError):
            as_expression(True)


class TestAlgebra:
    """Test cases for expression operators."""

    def test_add_expressions_sums_coefficients(self):
        """Shared variables accumulate."""
        expr = (2 * var(0) + var(1)) + (3 * var(0) + 1)
        assert expr.terms == {0: 5.0, 1: 1.0}
        assert expr.constant == 1.0

    def test_add_constant(self):
        """Numbers add to the constant term."""
        expr = var(0) + 2.5
        assert expr.terms == {0: 1.0}
        assert expr.constant == 2.5
        assert (2.5 + var(0)).equals(expr)

    def test_subtraction(self):
        """Subtraction on both sides."""
        assert (var(0) - var(1)).terms == {0: 1.0, 1: -1.0}
        expr = 10 - var(0)
        assert expr.terms == {0: -1.0}
        assert expr.constant == 10.0

    def test_cancellation_prunes_exact_zero(self):
        """x - x leaves no term."""
        expr = var(0) - var(0) + 2
        assert expr.terms == {}
        assert expr.is_constant
        assert expr.constant == 2.0

    def test_no_epsilon_pruning(self):
        """Floating noise is kept as a coefficient."""
        expr = 0.1 * var(0) + 0.2 * var(0) - 0.3 * var(0)
        assert 0 in expr.terms
        assert expr.coefficient(0) != 0.0

    def test_scale_and_negate(self):
        """Scalar multiplication applies to terms and constant."""
        expr = (var(0) + 2 * var(1) + 3).scale(2)
        assert expr.terms == {0: 2.0, 1: 4.0}
        assert expr.constant == 6.0

        negated = -expr
        assert negated.terms == {0: -2.0, 1: -4.0}
        assert negated.constant == -6.0
        assert expr.negate().equals(negated)

    def test_scale_by_zero(self):
        """Scaling by zero gives the zero expression."""
        assert (var(0) * 0).equals(LinearExpression.zero())

    def test_division(self):
        """Division by a scalar or constant expression."""
        assert (var(0) / 4).terms == {0: 0.25}
        assert (var(0) / LinearExpression.from_constant(2)).terms == {0: 0.5}

    def test_division_by_variable_is_not_linear(self):
        """Division by a non-constant expression is rejected."""
        with pytest.raises(TypeError):
            var(0) / var(1)

    def test_constant_expression_product(self):
        """A constant expression acts as a scalar."""
        expr = var(0) * LinearExpression.from_constant(3)
        assert expr.terms == {0: 3.0}
        expr = LinearExpression.from_constant(3) * var(0)
        assert expr.terms == {0: 3.0}

    def test_product_of_variables_is_not_linear(self):
        """Quadratic products are rejected."""
        with pytest.raises(TypeError):
            var(0) * var(1)

    def test_numpy_scalars(self):
        """numpy scalars combine on either side."""
        expr = np.float64(2.0) * var(0) + np.int64(1)
        assert isinstance(expr, LinearExpression)
        assert expr.terms == {0: 2.0}
        assert expr.constant == 1.0

    def test_builtin_sum(self):
        """sum() starts from 0 and folds with +."""
        expr = sum(var(i) for i in range(3))
        assert expr.terms == {0: 1.0, 1: 1.0, 2: 1.0}

    def test_sum_classmethod(self):
        """LinearExpression.sum accepts numbers and expressions."""
        expr = LinearExpression.sum([var(1), 2, var(0), var(1)])
        assert expr.terms == {1: 2.0, 0: 1.0}
        assert expr.variable_ids == (1, 0)
        assert expr.constant == 2.0

    def test_operands_are_not_mutated(self):
        """Operators return new values."""
        a = var(0) + 1
        b = var(1)
        _ = a + b
        _ = a * 3
        assert a.terms == {0: 1.0}
        assert a.constant == 1.0
        assert b.terms == {1: 1.0}

    def test_unsupported_operand(self):
        """Adding unrelated objects raises TypeError."""
        with pytest.raises(TypeError):
            var(0) + "1"

    def test_associativity_and_commutativity(self):
        """Grouping and order of addition do not change the result."""
        samples = [
            2 * var(0) - var(1) + 4,
            var(1) + 0.5 * var(2),
            -3 * var(0) + var(2) - 1,
            LinearExpression.from_constant(7),
            LinearExpression.zero(),
        ]
        for a in samples:
            for b in samples:
                assert (a + b).equals(b + a)
                for c in samples:
                    assert ((a + b) + c).equals(a + (b + c))

    def test_evaluate(self):
        """Evaluation against a value mapping."""
        expr = 2 * var(0) - var(1) + 3
        assert expr.evaluate({0: 1.5, 1: 4.0}) == 2.0

    def test_dense(self):
        """Dense coefficient vector."""
        expr = 2 * var(0) + 5 * var(2)
        np.testing.assert_array_equal(expr.dense(4), [2.0, 0.0, 5.0, 0.0])


class TestComparisons:
    """Test cases for constraints built by comparison operators."""

    def test_le_builds_constraint(self):
        """<= keeps both sides and the operator."""
        constraint = var(0) + var(1) <= 1
        assert isinstance(constraint, Constraint)
        assert constraint.sense is ConstraintSense.LE
        assert constraint.lhs.terms == {0: 1.0, 1: 1.0}
        assert constraint.rhs.equals(1)

    def test_reflected_comparison(self):
        """A number on the left flips the operator."""
        constraint = 1 <= var(0)
        assert constraint.sense is ConstraintSense.GE
        assert constraint.lhs.terms == {0: 1.0}
        assert constraint.rhs.equals(1)

    def test_eq_builds_constraint(self):
        """== builds an equality constraint."""
        constraint = var(0) == 2 * var(1)
        assert constraint.sense is ConstraintSense.EQ

    def test_normalized(self):
        """Terms move left, constants move right."""
        constraint = var(0) + 3 <= 2 * var(1) + 5
        expression, rhs = constraint.normalized()
        assert expression.terms == {0: 1.0, 1: -2.0}
        assert expression.constant == 0.0
        assert rhs == 2.0

    def test_constant_constraints(self):
        """Constant comparisons evaluate exactly."""
        false = var(0) - var(0) + 2 <= 1
        true = var(0) - var(0) + 1 <= 1
        assert false.is_constant
        assert false.holds_trivially() is False
        assert true.holds_trivially() is True
        assert (LinearExpression.from_constant(3) == 3).holds_trivially() is True
        assert (LinearExpression.from_constant(3) >= 4).holds_trivially() is False

    def test_holds_trivially_requires_constant(self):
        """Non-constant constraints have no fixed truth value."""
        with pytest.raises(ValueError):
            (var(0) <= 1).holds_trivially()

    def test_chained_comparison_rejected(self):
        """Constraints cannot be used as booleans."""
        with pytest.raises(TypeError):
            0 <= var(0) <= 1

    def test_expressions_are_unhashable(self):
        """== is overloaded, so expressions are not hashable."""
        with pytest.raises(TypeError):
            hash(var(0))

    def test_sense_helpers(self):
        """Operator evaluation and mirroring."""
        assert ConstraintSense.LE.holds(1.0, 1.0)
        assert not ConstraintSense.GE.holds(0.0, 1.0)
        assert ConstraintSense.LE.mirrored is ConstraintSense.GE
        assert ConstraintSense.EQ.mirrored is ConstraintSense.EQ


class TestObjectiveSense:
    """Test cases for objective sense parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("min", ObjectiveSense.MINIMIZE),
            ("minimize", ObjectiveSense.MINIMIZE),
            ("MAX", ObjectiveSense.MAXIMIZE),
            ("maximize", ObjectiveSense.MAXIMIZE),
            (ObjectiveSense.MAXIMIZE, ObjectiveSense.MAXIMIZE),
        ],
    )
    def test_parse(self, value, expected):
        """Aliases map onto the enum."""
        assert ObjectiveSense.parse(value) is expected

    def test_parse_invalid(self):
        """Unknown senses are rejected."""
        with pytest.raises(ValueError):
            ObjectiveSense.parse("sideways")


class TestFormatting:
    """Test cases for rendering."""

    def test_format_expression(self):
        """Default labels use variable ids."""
        expr = 2 * var(0) - var(1) + 3
        assert format_expression(expr) == "2*v0 - v1 + 3"

    def test_format_zero(self):
        """The zero expression renders as 0."""
        assert format_expression(LinearExpression.zero()) == "0"

    def test_format_leading_negative(self):
        """A negative first term keeps its sign."""
        assert format_expression(-var(0) + 1) == "-v0 + 1"

    def test_format_constraint_with_labels(self):
        """Custom labels."""
        labels = {0: "x[1]", 1: "x[2]"}
        text = format_constraint(var(0) + var(1) <= 1, labels.__getitem__)
        assert text == "x[1] + x[2] <= 1"

    def test_format_infinite_constant(self):
        """Non-finite constants still render."""
        assert format_expression(LinearExpression.from_constant(math.inf)) == "inf"

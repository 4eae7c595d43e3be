"""
Tests for Functions, Sets and Modifications
"""

import numpy as np
import pytest
from bridgeopt.indices import VariableIndex, ConstraintIndex
from bridgeopt.functions import (
    ScalarAffineFunction,
    ScalarAffineTerm,
    ScalarQuadraticFunction,
    ScalarQuadraticTerm,
    SingleVariable,
    VectorAffineFunction,
    VectorAffineTerm,
    VectorOfVariables,
    affine_function,
    apply_linear_map,
    convert_function,
    function_constant,
    negate,
    remove_variable,
    scalarize,
    to_affine,
    vectorize,
)
from bridgeopt.sets import (
    EqualTo,
    GreaterThan,
    Interval,
    LessThan,
    Nonnegatives,
    PositiveSemidefiniteConeTriangle,
    SecondOrderCone,
    ZeroOne,
    set_constant,
    shift_constant,
    triangle_index,
)
from bridgeopt.modifications import (
    FunctionChange,
    ScalarCoefficientChange,
    ScalarConstantChange,
    VectorCoefficientChange,
    VectorConstantChange,
    apply_modification,
)


x, y, z = VariableIndex(1), VariableIndex(2), VariableIndex(3)


class TestScalarFunctions:
    """Test scalar function evaluation and algebra."""

    def test_affine_evaluate(self):
        """Test 2x - y + 3 at (1, 4)."""
        f = affine_function([2.0, -1.0], [x, y], 3.0)
        assert f.evaluate({x: 1.0, y: 4.0}) == 1.0

    def test_quadratic_evaluate(self):
        """Test x*y + x + 1 at (2, 3)."""
        f = ScalarQuadraticFunction(
            [ScalarAffineTerm(1.0, x)], [ScalarQuadraticTerm(1.0, x, y)], 1.0
        )
        assert f.evaluate({x: 2.0, y: 3.0}) == 9.0
        assert f.referenced_variables() == {x, y}

    def test_canonical_merges_and_drops(self):
        """Duplicate terms merge, zeros vanish, terms sort by variable."""
        f = ScalarAffineFunction(
            [ScalarAffineTerm(1.0, y), ScalarAffineTerm(2.0, x), ScalarAffineTerm(-1.0, y)],
            0.5,
        )
        c = f.canonical()
        assert c.terms == (ScalarAffineTerm(2.0, x),)
        assert c.constant == 0.5

    def test_negate(self):
        """Negating a single variable gives an affine function."""
        f = negate(SingleVariable(x))
        assert isinstance(f, ScalarAffineFunction)
        assert f.terms == (ScalarAffineTerm(-1.0, x),)
        g = negate(affine_function([3.0], [y], 2.0))
        assert g.constant == -2.0
        assert g.terms[0].coefficient == -3.0

    def test_remove_variable(self):
        """Removing a variable drops every term involving it."""
        f = ScalarQuadraticFunction(
            [ScalarAffineTerm(1.0, x), ScalarAffineTerm(1.0, y)],
            [ScalarQuadraticTerm(1.0, x, y), ScalarQuadraticTerm(2.0, y, y)],
            0.0,
        )
        g = remove_variable(f, x)
        assert g.referenced_variables() == {y}
        assert len(g.quadratic_terms) == 1

    def test_function_constant(self):
        assert function_constant(SingleVariable(x)) == 0.0
        assert function_constant(affine_function([1.0], [x], 4.0)) == 4.0


class TestVectorFunctions:
    """Test vector functions and conversions."""

    def test_vector_affine_evaluate(self):
        """Test [x + 1, 2y] at (1, 2)."""
        f = VectorAffineFunction(
            [VectorAffineTerm(0, ScalarAffineTerm(1.0, x)),
             VectorAffineTerm(1, ScalarAffineTerm(2.0, y))],
            [1.0, 0.0],
        )
        np.testing.assert_array_equal(f.evaluate({x: 1.0, y: 2.0}), [2.0, 4.0])

    def test_output_index_checked(self):
        """Output indices must be within the dimension."""
        with pytest.raises(ValueError):
            VectorAffineFunction([VectorAffineTerm(2, ScalarAffineTerm(1.0, x))], [0.0, 0.0])

    def test_vectorize_scalarize(self):
        """Scalarizing a vectorized list gives back the rows."""
        rows = [affine_function([1.0], [x], 1.0), affine_function([2.0, 3.0], [x, y], 0.0)]
        f = vectorize(rows)
        assert f.output_dimension == 2
        back = scalarize(f)
        assert [r.canonical() for r in back] == [r.canonical() for r in rows]

    def test_to_affine_vector_of_variables(self):
        f = to_affine(VectorOfVariables([x, y]))
        assert isinstance(f, VectorAffineFunction)
        assert f.constants == (0.0, 0.0)

    def test_apply_linear_map(self):
        """Test the swap map on (x, y + 1)."""
        f = VectorAffineFunction(
            [VectorAffineTerm(0, ScalarAffineTerm(1.0, x)),
             VectorAffineTerm(1, ScalarAffineTerm(1.0, y))],
            [0.0, 1.0],
        )
        g = apply_linear_map(np.array([[0.0, 1.0], [1.0, 0.0]]), f)
        np.testing.assert_array_equal(g.evaluate({x: 5.0, y: 7.0}), [8.0, 5.0])

    def test_apply_linear_map_shape_checked(self):
        with pytest.raises(ValueError):
            apply_linear_map(np.eye(3), VectorOfVariables([x, y]))

    def test_convert_back_to_variables(self):
        """An identity affine function converts back to variables."""
        f = apply_linear_map(np.eye(2), VectorOfVariables([x, y]))
        assert convert_function(f, VectorOfVariables) == VectorOfVariables([x, y])

    def test_convert_rejects_non_identity(self):
        f = apply_linear_map(2.0 * np.eye(2), VectorOfVariables([x, y]))
        with pytest.raises(ValueError):
            convert_function(f, VectorOfVariables)


class TestSets:
    """Test set constants and shifting."""

    def test_interval_validation(self):
        with pytest.raises(ValueError):
            Interval(2.0, 1.0)

    def test_set_constant(self):
        assert set_constant(GreaterThan(1.5)) == 1.5
        assert set_constant(LessThan(-2.0)) == -2.0
        assert set_constant(EqualTo(3.0)) == 3.0
        with pytest.raises(ValueError):
            set_constant(ZeroOne())

    def test_shift_constant(self):
        """x + 3 <= 5  <=>  x <= 2."""
        assert shift_constant(LessThan(5.0), -3.0) == LessThan(2.0)
        assert shift_constant(Interval(0.0, 5.0), 1.0) == Interval(1.0, 6.0)

    def test_dimensions(self):
        assert GreaterThan(0.0).dimension == 1
        assert Nonnegatives(4).dimension == 4
        assert SecondOrderCone(3).dimension == 3
        assert PositiveSemidefiniteConeTriangle(3).dimension == 6

    def test_triangle_index(self):
        """Upper triangle, column by column."""
        assert triangle_index(0, 0) == 0
        assert triangle_index(0, 1) == 1
        assert triangle_index(1, 1) == 2
        assert triangle_index(2, 0) == 3
        assert triangle_index(2, 2) == 5


class TestIndices:
    """Test index types."""

    def test_bridged_flag(self):
        assert ConstraintIndex(SingleVariable, GreaterThan, -1).is_bridged
        assert not ConstraintIndex(SingleVariable, GreaterThan, 1).is_bridged

    def test_variable_order(self):
        assert sorted([z, x, y]) == [x, y, z]


class TestModifications:
    """Test apply_modification."""

    def test_scalar_constant(self):
        f = apply_modification(affine_function([1.0], [x], 1.0), ScalarConstantChange(5.0))
        assert f.constant == 5.0

    def test_scalar_coefficient(self):
        """Setting a coefficient replaces, zero removes."""
        f = affine_function([1.0, 2.0], [x, y])
        g = apply_modification(f, ScalarCoefficientChange(x, 4.0))
        assert g.evaluate({x: 1.0, y: 1.0}) == 6.0
        h = apply_modification(f, ScalarCoefficientChange(y, 0.0))
        assert h.referenced_variables() == {x}

    def test_vector_changes(self):
        f = to_affine(VectorOfVariables([x, y]))
        g = apply_modification(f, VectorConstantChange([1.0, 2.0]))
        assert g.constants == (1.0, 2.0)
        h = apply_modification(f, VectorCoefficientChange(x, [(0, 3.0), (1, 1.0)]))
        np.testing.assert_array_equal(h.evaluate({x: 1.0, y: 1.0}), [3.0, 2.0])

    def test_function_change_type_checked(self):
        with pytest.raises(ValueError):
            apply_modification(affine_function([1.0], [x]), FunctionChange(SingleVariable(x)))

    def test_inapplicable_change(self):
        """Variable functions cannot take a constant."""
        with pytest.raises(ValueError):
            apply_modification(SingleVariable(x), ScalarConstantChange(1.0))

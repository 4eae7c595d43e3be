"""
Tests for the Bridging Optimizer
"""

import numpy as np
import pytest
from bridgeopt.indices import ConstraintIndex
from bridgeopt.functions import (
    ScalarAffineFunction,
    SingleVariable,
    VectorAffineFunction,
    VectorOfVariables,
    affine_function,
    canonical,
    to_affine,
)
from bridgeopt.sets import (
    EqualTo,
    GreaterThan,
    Integer,
    Interval,
    LessThan,
    Nonnegatives,
    Nonpositives,
    PositiveSemidefiniteConeTriangle,
    SecondOrderCone,
    ZeroOne,
    Zeros,
)
from bridgeopt.modifications import (
    FunctionChange,
    ScalarCoefficientChange,
    ScalarConstantChange,
    SetChange,
    VectorConstantChange,
)
from bridgeopt.attributes import (
    ConstraintDual,
    ConstraintFunction,
    ConstraintName,
    ConstraintPrimal,
    ConstraintSet,
    ListOfConstraintIndices,
    ListOfConstraintTypesPresent,
    ListOfVariableIndices,
    NumberOfConstraints,
    NumberOfVariables,
    TerminationStatus,
    TerminationStatusCode,
    VariableName,
)
from bridgeopt.errors import (
    AddConstraintNotAllowed,
    DeleteNotAllowed,
    DimensionMismatch,
    InvalidIndex,
    ModifyConstraintNotAllowed,
    SetAttributeNotAllowed,
    UnsupportedConstraint,
)
from bridgeopt.node_types import constraint_node, objective_node, variable_node
from bridgeopt.bridges import (
    BridgeOptimizer,
    BridgeRegistry,
    ConstraintBridge,
    SplitIntervalBridge,
    full_bridge_optimizer,
)
from bridgeopt.utilities import MockOptimizer


LP = [
    constraint_node(ScalarAffineFunction, GreaterThan),
    constraint_node(ScalarAffineFunction, LessThan),
    constraint_node(ScalarAffineFunction, EqualTo),
    objective_node(ScalarAffineFunction),
]
CONIC_PSD = [
    constraint_node(VectorAffineFunction, Zeros),
    constraint_node(VectorAffineFunction, Nonnegatives),
    constraint_node(VectorAffineFunction, PositiveSemidefiniteConeTriangle),
    objective_node(ScalarAffineFunction),
]


def make_optimizer(supported):
    mock = MockOptimizer(supported=supported)
    return full_bridge_optimizer(mock), mock


def assert_same_function(f, g, variables):
    """Compare two functions by value at a fixed point."""
    values = {v: 1.0 + 0.5 * i for i, v in enumerate(variables)}
    np.testing.assert_array_almost_equal(
        np.atleast_1d(f.evaluate(values)), np.atleast_1d(g.evaluate(values))
    )


class FailingBridge(ConstraintBridge):
    """Adds a variable and one half of an interval, then fails."""

    @classmethod
    def supports_constraint(cls, function_type, set_type):
        return function_type is ScalarAffineFunction and set_type is Interval

    @classmethod
    def target_nodes(cls, node):
        return [constraint_node(ScalarAffineFunction, GreaterThan)]

    @classmethod
    def bridge_constraint(cls, inner, f, s):
        inner.add_variable()
        inner.add_constraint(f, GreaterThan(s.lower))
        raise RuntimeError("bridge failed halfway")


class TestIntervalSplit:
    """Test an interval constraint on an LP back end."""

    def test_split_into_native_halves(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        f = affine_function([1.0], [x])
        ci = opt.add_constraint(f, Interval(1.0, 2.0))

        assert ci.is_bridged
        assert mock.get(NumberOfConstraints(ScalarAffineFunction, GreaterThan)) == 1
        assert mock.get(NumberOfConstraints(ScalarAffineFunction, LessThan)) == 1
        assert opt.get(NumberOfConstraints(ScalarAffineFunction, Interval)) == 1
        assert opt.get(NumberOfConstraints(ScalarAffineFunction, GreaterThan)) == 0
        assert opt.bridge_kinds(ci) == ["SplitIntervalBridge"]

    def test_single_planner_build(self):
        """Planning the halves reuses the table built for the interval."""
        opt, _ = make_optimizer(LP)
        x = opt.add_variable()
        opt.add_constraint(affine_function([1.0], [x]), Interval(0.0, 5.0))
        assert opt.graph.rebuilds == 1
        opt.add_constraint(affine_function([2.0], [x]), Interval(0.0, 1.0))
        assert opt.graph.rebuilds == 1

    def test_function_and_set(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        f = affine_function([2.0], [x], 1.0)
        ci = opt.add_constraint(f, Interval(1.0, 2.0))
        assert opt.get(ConstraintSet(), ci) == Interval(1.0, 2.0)
        assert canonical(opt.get(ConstraintFunction(), ci)) == canonical(f)

    def test_delete_removes_both_halves(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        opt.delete(ci)
        assert not opt.is_valid(ci)
        assert mock.get(NumberOfConstraints(ScalarAffineFunction, GreaterThan)) == 0
        assert mock.get(NumberOfConstraints(ScalarAffineFunction, LessThan)) == 0
        assert len(opt.store) == 0
        assert opt.store.internal_indices() == []

    def test_results(self):
        """Primal comes from the lower half, dual is the sum of halves."""
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        lower, upper = opt.chain(ci)[0].constraint_indices()
        mock.set_mock_optimize(
            lambda m: m.mock_optimize([1.5], duals={lower: 0.0, upper: -2.0})
        )
        opt.optimize()
        assert opt.get(TerminationStatus()) == TerminationStatusCode.OPTIMAL
        assert opt.get(ConstraintPrimal(), ci) == pytest.approx(1.5)
        assert opt.get(ConstraintDual(), ci) == pytest.approx(-2.0)

    def test_variable_interval_two_links(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(SingleVariable(x), Interval(0.0, 4.0))
        assert opt.bridge_kinds(ci) == ["ScalarFunctionizeBridge", "SplitIntervalBridge"]
        assert opt.get(ConstraintFunction(), ci) == SingleVariable(x)
        assert opt.get(ConstraintSet(), ci) == Interval(0.0, 4.0)
        opt.delete(ci)
        assert len(opt.store) == 0
        assert mock.get(ListOfConstraintTypesPresent()) == []


class TestConeScenario:
    """Test a second order cone on a PSD-only back end."""

    def _setup(self):
        opt, mock = make_optimizer(CONIC_PSD)
        x, y, z = opt.add_variables(3)
        ci = opt.add_constraint(VectorOfVariables([x, y, z]), SecondOrderCone(3))
        psd = mock.get(ListOfConstraintIndices(VectorAffineFunction,
                                               PositiveSemidefiniteConeTriangle))
        return opt, mock, (x, y, z), ci, psd

    def test_chain(self):
        opt, mock, _, ci, psd = self._setup()
        assert opt.bridge_kinds(ci) == ["SOCtoRSOCBridge", "RSOCtoPSDBridge"]
        assert len(psd) == 1
        assert mock.get(ConstraintSet(), psd[0]) == PositiveSemidefiniteConeTriangle(2)

    def test_function_and_set(self):
        opt, mock, variables, ci, psd = self._setup()
        assert opt.get(ConstraintSet(), ci) == SecondOrderCone(3)
        assert opt.get(ConstraintFunction(), ci) == VectorOfVariables(list(variables))

    def test_matrix_entries(self):
        """The PSD matrix is [[t, x], [x, 2u]] in RSOC coordinates."""
        opt, mock, variables, ci, psd = self._setup()
        mock.mock_optimize([2.0, 0.0, 1.0])
        r = 1.0 / np.sqrt(2.0)
        t, u = r * 2.0, r * 2.0
        np.testing.assert_array_almost_equal(
            mock.get(ConstraintPrimal(), psd[0]), [t, 1.0, 2.0 * u]
        )

    def test_primal_recovery(self):
        opt, mock, variables, ci, psd = self._setup()
        mock.mock_optimize([2.0, 0.0, 1.0])
        np.testing.assert_array_almost_equal(opt.get(ConstraintPrimal(), ci), [2.0, 0.0, 1.0])

    def test_dual_recovery(self):
        """Dual is the adjoint of both maps applied to the PSD dual."""
        opt, mock, variables, ci, psd = self._setup()
        mock.mock_optimize([2.0, 0.0, 1.0], duals={psd[0]: [1.0, 0.0, 1.0]})
        np.testing.assert_array_almost_equal(
            opt.get(ConstraintDual(), ci), [3.0 / np.sqrt(2.0), -1.0 / np.sqrt(2.0), 0.0]
        )

    def test_delete(self):
        opt, mock, variables, ci, psd = self._setup()
        opt.delete(ci)
        assert not mock.is_valid(psd[0])
        assert len(opt.store) == 0
        assert mock.get(NumberOfVariables()) == 3


class TestRoundTrip:
    """Function and set read back as added, whatever the chain."""

    def test_lp_pairs(self):
        opt, mock = make_optimizer(LP)
        x, y = opt.add_variables(2)
        pairs = [
            (affine_function([1.0, 2.0], [x, y], 1.0), Interval(-1.0, 3.0)),
            (affine_function([3.0], [y]), GreaterThan(2.0)),
            (SingleVariable(x), Interval(0.0, 1.0)),
            (SingleVariable(x), GreaterThan(-1.0)),
            (SingleVariable(y), LessThan(5.0)),
            (SingleVariable(y), EqualTo(2.0)),
        ]
        for f, s in pairs:
            ci = opt.add_constraint(f, s)
            assert opt.get(ConstraintSet(), ci) == s
            assert canonical(opt.get(ConstraintFunction(), ci)) == canonical(f)

    def test_conic_pairs(self):
        opt, mock = make_optimizer(CONIC_PSD)
        x, y = opt.add_variables(2)
        g = affine_function([1.0, -1.0], [x, y], 2.0)
        pairs = [
            (VectorOfVariables([x, y]), Nonnegatives(2)),
            (VectorOfVariables([x, y]), Nonpositives(2)),
            (VectorOfVariables([x, y]), Zeros(2)),
            (g, GreaterThan(1.0)),
            (g, LessThan(1.0)),
            (g, EqualTo(0.0)),
            (SingleVariable(x), GreaterThan(0.5)),
        ]
        for f, s in pairs:
            ci = opt.add_constraint(f, s)
            assert opt.get(ConstraintSet(), ci) == s
            assert_same_function(opt.get(ConstraintFunction(), ci), f, [x, y])

    def test_interval_set_change(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        opt.set(ConstraintSet(), ci, Interval(0.0, 3.0))
        assert opt.get(ConstraintSet(), ci) == Interval(0.0, 3.0)
        lower, upper = opt.chain(ci)[0].constraint_indices()
        assert mock.get(ConstraintSet(), lower) == GreaterThan(0.0)
        assert mock.get(ConstraintSet(), upper) == LessThan(3.0)


class TestUnsupported:
    """Test additions with no finite-cost chain."""

    def test_nothing_added(self):
        opt, mock = make_optimizer(LP)
        x, y, z = opt.add_variables(3)
        with pytest.raises(UnsupportedConstraint):
            opt.add_constraint(VectorOfVariables([x, y, z]), SecondOrderCone(3))
        assert mock.get(NumberOfVariables()) == 3
        assert mock.get(ListOfConstraintTypesPresent()) == []
        assert len(opt.store) == 0

    def test_supports(self):
        opt, mock = make_optimizer(LP)
        assert opt.supports_constraint(ScalarAffineFunction, Interval)
        assert not opt.supports_constraint(VectorOfVariables, SecondOrderCone)
        assert opt.is_bridged(constraint_node(ScalarAffineFunction, Interval))
        assert not opt.is_bridged(constraint_node(ScalarAffineFunction, GreaterThan))

    def test_dimension_mismatch(self):
        opt, mock = make_optimizer(CONIC_PSD)
        x, y = opt.add_variables(2)
        with pytest.raises(DimensionMismatch):
            opt.add_constraint(VectorOfVariables([x, y]), Nonnegatives(3))


class TestRollback:
    """A failing chain leaves the model as it was."""

    def test_failed_bridge_rolled_back(self):
        mock = MockOptimizer(supported=LP)
        registry = BridgeRegistry()
        registry.register(FailingBridge)
        opt = BridgeOptimizer(mock, registry)
        x = opt.add_variable()
        with pytest.raises(RuntimeError):
            opt.add_constraint(affine_function([1.0], [x]), Interval(0.0, 1.0))
        assert mock.get(NumberOfVariables()) == 1
        assert mock.get(NumberOfConstraints(ScalarAffineFunction, GreaterThan)) == 0
        assert len(opt.store) == 0
        assert opt.store.internal_indices() == []

    def test_usable_after_rollback(self):
        mock = MockOptimizer(supported=LP)
        registry = BridgeRegistry()
        registry.register(FailingBridge)
        opt = BridgeOptimizer(mock, registry)
        x = opt.add_variable()
        with pytest.raises(RuntimeError):
            opt.add_constraint(affine_function([1.0], [x]), Interval(0.0, 1.0))
        ci = opt.add_constraint(affine_function([1.0], [x]), GreaterThan(0.0))
        assert not ci.is_bridged
        assert opt.is_valid(ci)


class TestInternalIndices:
    """Indices created by bridges are hidden and protected."""

    def _setup(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        lower, upper = opt.chain(ci)[0].constraint_indices()
        return opt, mock, x, ci, lower

    def test_listing(self):
        opt, mock, x, ci, lower = self._setup()
        assert opt.get(ListOfConstraintTypesPresent()) == [(ScalarAffineFunction, Interval)]
        assert opt.get(ListOfConstraintIndices(ScalarAffineFunction, Interval)) == [ci]
        assert opt.get(ListOfConstraintIndices(ScalarAffineFunction, GreaterThan)) == []

    def test_modify_internal(self):
        opt, mock, x, ci, lower = self._setup()
        with pytest.raises(ModifyConstraintNotAllowed):
            opt.modify(lower, ScalarConstantChange(1.0))

    def test_delete_internal(self):
        opt, mock, x, ci, lower = self._setup()
        with pytest.raises(DeleteNotAllowed):
            opt.delete(lower)
        assert mock.is_valid(lower)

    def test_set_internal(self):
        opt, mock, x, ci, lower = self._setup()
        with pytest.raises(SetAttributeNotAllowed):
            opt.set(ConstraintName(), lower, "lower")

    def test_double_delete(self):
        opt, mock, x, ci, lower = self._setup()
        opt.delete(ci)
        with pytest.raises(InvalidIndex):
            opt.delete(ci)
        with pytest.raises(InvalidIndex):
            opt.get(ConstraintSet(), ci)

    def test_broken_chain(self):
        """A sub-constraint deleted behind the optimizer's back is detected."""
        opt, mock, x, ci, lower = self._setup()
        mock.delete(lower)
        with pytest.raises(InvalidIndex):
            opt.delete(ci)

    def test_foreign_index(self):
        opt, mock = make_optimizer(LP)
        with pytest.raises(InvalidIndex):
            opt.delete(ConstraintIndex(ScalarAffineFunction, Interval, -7))


class TestSlack:
    """Test a slack chain with an auxiliary variable."""

    SUPPORTED = [
        constraint_node(ScalarAffineFunction, EqualTo),
        constraint_node(SingleVariable, GreaterThan),
    ]

    def _setup(self):
        opt, mock = make_optimizer(self.SUPPORTED)
        x = opt.add_variable()
        f = affine_function([2.0], [x], 1.0)
        ci = opt.add_constraint(f, GreaterThan(3.0))
        return opt, mock, x, f, ci

    def test_chain(self):
        opt, mock, x, f, ci = self._setup()
        assert opt.bridge_kinds(ci) == ["ScalarSlackBridge", "FreeVariablesBridge"]
        assert opt.plan(constraint_node(ScalarAffineFunction, GreaterThan)).cost == 2.0

    def test_slack_hidden(self):
        opt, mock, x, f, ci = self._setup()
        assert opt.get(NumberOfVariables()) == 1
        assert opt.get(ListOfVariableIndices()) == [x]
        assert mock.get(NumberOfVariables()) == 2

    def test_primal(self):
        opt, mock, x, f, ci = self._setup()
        mock.mock_optimize([2.0, 5.0])
        assert opt.get(ConstraintPrimal(), ci) == pytest.approx(5.0)

    def test_function_and_set(self):
        opt, mock, x, f, ci = self._setup()
        assert canonical(opt.get(ConstraintFunction(), ci)) == canonical(f)
        assert opt.get(ConstraintSet(), ci) == GreaterThan(3.0)

    def test_slack_protected(self):
        opt, mock, x, f, ci = self._setup()
        slack = opt.chain(ci)[0].slack
        with pytest.raises(DeleteNotAllowed):
            opt.delete(slack)
        with pytest.raises(AddConstraintNotAllowed):
            opt.add_constraint(SingleVariable(slack), GreaterThan(0.0))

    def test_delete_removes_slack(self):
        opt, mock, x, f, ci = self._setup()
        opt.delete(ci)
        assert mock.get(NumberOfVariables()) == 1
        assert mock.get(ListOfConstraintTypesPresent()) == []
        assert opt.store.internal_indices() == []


class TestModify:
    """Test modifications translated through chains."""

    def test_constant_through_split(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        opt.modify(ci, ScalarConstantChange(2.0))
        lower, upper = opt.chain(ci)[0].constraint_indices()
        assert mock.get(ConstraintFunction(), lower).constant == 2.0
        assert mock.get(ConstraintFunction(), upper).constant == 2.0

    def test_coefficient_through_split(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        opt.modify(ci, ScalarCoefficientChange(x, 3.0))
        f = opt.get(ConstraintFunction(), ci)
        assert f.evaluate({x: 1.0}) == 3.0

    def test_set_through_vectorize(self):
        """The new set constant moves into the vector constant."""
        opt, mock = make_optimizer(CONIC_PSD)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([2.0], [x], 1.0), GreaterThan(3.0))
        assert opt.bridge_kinds(ci) == ["VectorizeBridge"]
        opt.modify(ci, SetChange(GreaterThan(5.0)))
        assert opt.get(ConstraintSet(), ci) == GreaterThan(5.0)
        inner = opt.chain(ci)[0].constraint
        assert mock.get(ConstraintFunction(), inner).constants == (-4.0,)
        assert_same_function(opt.get(ConstraintFunction(), ci),
                             affine_function([2.0], [x], 1.0), [x])

    def test_constant_through_vectorize(self):
        opt, mock = make_optimizer(CONIC_PSD)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([2.0], [x], 1.0), GreaterThan(3.0))
        opt.modify(ci, ScalarConstantChange(0.0))
        assert opt.get(ConstraintFunction(), ci).constant == pytest.approx(0.0)
        assert opt.get(ConstraintSet(), ci) == GreaterThan(3.0)

    def test_no_partial_application(self):
        """A change one link cannot express leaves every link untouched."""
        supported = [
            constraint_node(SingleVariable, GreaterThan),
            constraint_node(SingleVariable, LessThan),
        ]
        opt, mock = make_optimizer(supported)
        x = opt.add_variable()
        ci = opt.add_constraint(SingleVariable(x), Interval(0.0, 1.0))
        assert opt.bridge_kinds(ci) == ["SplitIntervalBridge"]
        assert not opt.supports_modify(ci, ScalarConstantChange(1.0))
        with pytest.raises(ModifyConstraintNotAllowed):
            opt.modify(ci, ScalarConstantChange(1.0))
        lower, upper = opt.chain(ci)[0].constraint_indices()
        assert mock.get(ConstraintFunction(), lower) == SingleVariable(x)
        assert mock.get(ConstraintFunction(), upper) == SingleVariable(x)

    def test_set_type_checked(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        with pytest.raises(ModifyConstraintNotAllowed):
            opt.modify(ci, SetChange(GreaterThan(0.0)))
        assert opt.get(ConstraintSet(), ci) == Interval(1.0, 2.0)

    def test_function_replacement(self):
        opt, mock = make_optimizer(LP)
        x, y = opt.add_variables(2)
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        g = affine_function([1.0, 1.0], [x, y])
        opt.set(ConstraintFunction(), ci, g)
        assert canonical(opt.get(ConstraintFunction(), ci)) == canonical(g)

    def test_vector_constant_through_scalarize(self):
        opt, mock = make_optimizer(LP)
        x, y = opt.add_variables(2)
        f = to_affine(VectorOfVariables([x, y]))
        ci = opt.add_constraint(f, Nonnegatives(2))
        assert opt.bridge_kinds(ci) == ["ScalarizeBridge"]
        opt.modify(ci, VectorConstantChange([1.0, -1.0]))
        assert opt.get(ConstraintFunction(), ci).constants == (1.0, -1.0)

    def test_supports_modify_wrong_dimension(self):
        """A replacement of the wrong dimension is reported, not raised."""
        opt, _ = make_optimizer(CONIC_PSD)
        x = opt.add_variables(3)
        ci = opt.add_constraint(VectorOfVariables(x), SecondOrderCone(3))
        change = FunctionChange(VectorOfVariables(x[:2]))
        assert not opt.supports_modify(ci, change)
        assert opt.supports_modify(ci, FunctionChange(VectorOfVariables(x[::-1])))
        with pytest.raises(DimensionMismatch):
            opt.modify(ci, change)


class TestConstrainedVariables:
    """Test variables created already constrained."""

    def test_native(self):
        mock = MockOptimizer(supported=[variable_node(ZeroOne)])
        opt = full_bridge_optimizer(mock)
        vi, ci = opt.add_constrained_variable(ZeroOne())
        assert not ci.is_bridged
        assert opt.get(ListOfVariableIndices()) == [vi]

    def test_free_variables_bridge(self):
        opt, mock = make_optimizer(None)
        vi, ci = opt.add_constrained_variable(GreaterThan(1.0))
        assert ci.is_bridged
        assert ci.function_type is SingleVariable
        assert opt.bridge_kinds(ci) == ["FreeVariablesBridge"]
        assert opt.get(ListOfVariableIndices()) == [vi]
        assert opt.get(ConstraintFunction(), ci) == SingleVariable(vi)
        assert opt.get(ConstraintSet(), ci) == GreaterThan(1.0)

    def test_vector(self):
        opt, mock = make_optimizer(None)
        vis, ci = opt.add_constrained_variables(Nonnegatives(2))
        assert len(vis) == 2
        assert ci.function_type is VectorOfVariables
        assert opt.get(NumberOfVariables()) == 2
        assert opt.get(ConstraintFunction(), ci) == VectorOfVariables(vis)

    def test_variable_in_use(self):
        """A variable stored in a bridged variable constraint cannot go."""
        opt, mock = make_optimizer(None)
        vi, ci = opt.add_constrained_variable(GreaterThan(1.0))
        with pytest.raises(DeleteNotAllowed):
            opt.delete(vi)
        opt.delete(ci)
        opt.delete(vi)
        assert opt.get(NumberOfVariables()) == 0

    def test_wrong_arity(self):
        opt, mock = make_optimizer(None)
        with pytest.raises(ValueError):
            opt.add_constrained_variable(Nonnegatives(2))
        with pytest.raises(ValueError):
            opt.add_constrained_variables(Integer())


class TestNames:
    """Test names of bridged and native constraints."""

    def test_bridged_name(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        assert opt.get(ConstraintName(), ci) == ""
        opt.set(ConstraintName(), ci, "range")
        assert opt.get(ConstraintName(), ci) == "range"

    def test_native_name(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), GreaterThan(0.0))
        opt.set(ConstraintName(), ci, "lower")
        assert mock.get(ConstraintName(), ci) == "lower"
        opt.set(VariableName(), x, "x")
        assert opt.get(VariableName(), x) == "x"


class TestLifecycle:
    """Test emptying and bridge registration on a live optimizer."""

    def test_empty(self):
        opt, mock = make_optimizer(LP)
        x = opt.add_variable()
        opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        assert not opt.is_empty()
        opt.empty()
        assert opt.is_empty()

    def test_add_and_remove_bridge(self):
        mock = MockOptimizer(supported=LP)
        opt = BridgeOptimizer(mock)
        assert not opt.supports_constraint(ScalarAffineFunction, Interval)
        opt.add_bridge(SplitIntervalBridge)
        assert opt.supports_constraint(ScalarAffineFunction, Interval)
        opt.remove_bridge(SplitIntervalBridge)
        assert not opt.supports_constraint(ScalarAffineFunction, Interval)

    def test_capabilities_changed(self):
        opt, mock = make_optimizer(LP)
        node = constraint_node(ScalarAffineFunction, Interval)
        assert opt.is_bridged(node)
        mock.allow(node)
        opt.notify_capabilities_changed()
        assert not opt.is_bridged(node)
        x = opt.add_variable()
        ci = opt.add_constraint(affine_function([1.0], [x]), Interval(1.0, 2.0))
        assert not ci.is_bridged

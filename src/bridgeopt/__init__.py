"""
bridgeopt - Constraint Bridging for Optimization Back Ends

Lets a back end that natively accepts only a few (function, set)
constraint types accept many more, by composing reformulation rules
("bridges") and translating solutions back:

- The bridge graph has node types as vertices and bridges as edges
- The planner finds the cheapest chain of bridges to supported types
- The bridging optimizer builds chains on add and inverts results,
  modifications and deletions through them

Typical use:

    from bridgeopt import full_bridge_optimizer, MockOptimizer
    model = full_bridge_optimizer(MockOptimizer(supported=[...]))
"""

from .indices import (
    VariableIndex,
    ConstraintIndex,
)
from .functions import (
    AbstractFunction,
    AbstractScalarFunction,
    AbstractVectorFunction,
    ScalarAffineTerm,
    ScalarQuadraticTerm,
    VectorAffineTerm,
    SingleVariable,
    VectorOfVariables,
    ScalarAffineFunction,
    ScalarQuadraticFunction,
    VectorAffineFunction,
    to_affine,
    negate,
    vectorize,
    scalarize,
    apply_linear_map,
    function_constant,
    remove_variable,
    canonical,
    affine_function,
)
from .sets import (
    AbstractSet,
    AbstractScalarSet,
    AbstractVectorSet,
    GreaterThan,
    LessThan,
    EqualTo,
    Interval,
    Integer,
    ZeroOne,
    Nonnegatives,
    Nonpositives,
    Zeros,
    SecondOrderCone,
    RotatedSecondOrderCone,
    PositiveSemidefiniteConeTriangle,
    set_constant,
    shift_constant,
    dimension,
)
from .modifications import (
    AbstractModification,
    ScalarConstantChange,
    ScalarCoefficientChange,
    VectorConstantChange,
    VectorCoefficientChange,
    FunctionChange,
    SetChange,
    apply_modification,
)
from .attributes import (
    OptimizationSense,
    TerminationStatusCode,
    ResultStatusCode,
    NumberOfVariables,
    ListOfVariableIndices,
    NumberOfConstraints,
    ListOfConstraintIndices,
    ListOfConstraintTypesPresent,
    ObjectiveFunction,
    ObjectiveFunctionType,
    ObjectiveSense,
    ObjectiveValue,
    ObjectiveBound,
    TerminationStatus,
    PrimalStatus,
    DualStatus,
    VariablePrimal,
    VariableName,
    ConstraintFunction,
    ConstraintSet,
    ConstraintPrimal,
    ConstraintDual,
    ConstraintName,
)
from .errors import (
    BridgeOptError,
    UnsupportedError,
    UnsupportedConstraint,
    UnsupportedObjective,
    UnsupportedAttribute,
    NotAllowedError,
    AddConstraintNotAllowed,
    ModifyConstraintNotAllowed,
    ModifyObjectiveNotAllowed,
    DeleteNotAllowed,
    SetAttributeNotAllowed,
    InvalidIndex,
    DimensionMismatch,
)
from .node_types import (
    NodeKind,
    NodeType,
    constraint_node,
    variable_node,
    objective_node,
    node_type_of,
    parse_node,
)
from .costs import (
    BridgeCategory,
    CostModel,
    DEFAULT_COSTS,
)
from .utilities import (
    ModelLike,
    Model,
    MockOptimizer,
    add_scalar_constraint,
)
from .bridges import (
    Bridge,
    BridgeKind,
    BridgeRegistry,
    BridgeGraph,
    BridgeOptimizer,
    default_registry,
    full_bridge_optimizer,
)

__version__ = "0.1.0"

__all__ = [
    # Indices
    'VariableIndex',
    'ConstraintIndex',

    # Functions
    'AbstractFunction',
    'AbstractScalarFunction',
    'AbstractVectorFunction',
    'ScalarAffineTerm',
    'ScalarQuadraticTerm',
    'VectorAffineTerm',
    'SingleVariable',
    'VectorOfVariables',
    'ScalarAffineFunction',
    'ScalarQuadraticFunction',
    'VectorAffineFunction',
    'to_affine',
    'negate',
    'vectorize',
    'scalarize',
    'apply_linear_map',
    'function_constant',
    'remove_variable',
    'canonical',
    'affine_function',

    # Sets
    'AbstractSet',
    'AbstractScalarSet',
    'AbstractVectorSet',
    'GreaterThan',
    'LessThan',
    'EqualTo',
    'Interval',
    'Integer',
    'ZeroOne',
    'Nonnegatives',
    'Nonpositives',
    'Zeros',
    'SecondOrderCone',
    'RotatedSecondOrderCone',
    'PositiveSemidefiniteConeTriangle',
    'set_constant',
    'shift_constant',
    'dimension',

    # Modifications
    'AbstractModification',
    'ScalarConstantChange',
    'ScalarCoefficientChange',
    'VectorConstantChange',
    'VectorCoefficientChange',
    'FunctionChange',
    'SetChange',
    'apply_modification',

    # Attributes
    'OptimizationSense',
    'TerminationStatusCode',
    'ResultStatusCode',
    'NumberOfVariables',
    'ListOfVariableIndices',
    'NumberOfConstraints',
    'ListOfConstraintIndices',
    'ListOfConstraintTypesPresent',
    'ObjectiveFunction',
    'ObjectiveFunctionType',
    'ObjectiveSense',
    'ObjectiveValue',
    'ObjectiveBound',
    'TerminationStatus',
    'PrimalStatus',
    'DualStatus',
    'VariablePrimal',
    'VariableName',
    'ConstraintFunction',
    'ConstraintSet',
    'ConstraintPrimal',
    'ConstraintDual',
    'ConstraintName',

    # Errors
    'BridgeOptError',
    'UnsupportedError',
    'UnsupportedConstraint',
    'UnsupportedObjective',
    'UnsupportedAttribute',
    'NotAllowedError',
    'AddConstraintNotAllowed',
    'ModifyConstraintNotAllowed',
    'ModifyObjectiveNotAllowed',
    'DeleteNotAllowed',
    'SetAttributeNotAllowed',
    'InvalidIndex',
    'DimensionMismatch',

    # Node types
    'NodeKind',
    'NodeType',
    'constraint_node',
    'variable_node',
    'objective_node',
    'node_type_of',
    'parse_node',

    # Costs
    'BridgeCategory',
    'CostModel',
    'DEFAULT_COSTS',

    # Models
    'ModelLike',
    'Model',
    'MockOptimizer',
    'add_scalar_constraint',

    # Bridging
    'Bridge',
    'BridgeKind',
    'BridgeRegistry',
    'BridgeGraph',
    'BridgeOptimizer',
    'default_registry',
    'full_bridge_optimizer',
]

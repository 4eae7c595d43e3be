"""
Constraint and Objective Functions

Represents the functions a constraint restricts or an objective
optimizes. All functions are immutable values: every transformation
returns a new function.

Each function is one of:
- SingleVariable: x_i
- VectorOfVariables: (x_i1, ..., x_ik)
- ScalarAffineFunction: sum_k a_k x_k + b
- VectorAffineFunction: A x + b, stored as (row, coefficient, variable) terms
- ScalarQuadraticFunction: sum_k q_k x_ik x_jk + sum_k a_k x_k + b

Quadratic terms carry their coefficient as written, so the term
(2.0, x, x) contributes 2 x^2.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, Tuple, Union
import numpy as np

from .indices import VariableIndex


Values = Mapping[VariableIndex, float]

# Tolerance for recognizing unit coefficients after a numeric round trip
_UNIT_TOL = 1e-9


@dataclass(frozen=True)
class AbstractFunction:
    """Base class for functions."""

    @property
    def output_dimension(self) -> int:
        return 1

    def evaluate(self, values: Values) -> Union[float, np.ndarray]:
        """Evaluate the function given variable values."""
        raise NotImplementedError

    def referenced_variables(self) -> Set[VariableIndex]:
        """Variables appearing in the function."""
        raise NotImplementedError

    def to_canonical(self) -> Dict[str, Any]:
        """Convert to canonical dictionary form."""
        raise NotImplementedError


@dataclass(frozen=True)
class AbstractScalarFunction(AbstractFunction):
    """Base class for functions with one output."""


@dataclass(frozen=True)
class AbstractVectorFunction(AbstractFunction):
    """Base class for functions with several outputs."""


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScalarAffineTerm:
    coefficient: float
    variable: VariableIndex


@dataclass(frozen=True)
class ScalarQuadraticTerm:
    coefficient: float
    variable_1: VariableIndex
    variable_2: VariableIndex


@dataclass(frozen=True)
class VectorAffineTerm:
    output_index: int
    scalar_term: ScalarAffineTerm


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SingleVariable(AbstractScalarFunction):
    """The function x_i."""
    variable: VariableIndex = None

    def evaluate(self, values: Values) -> float:
        return float(values[self.variable])

    def referenced_variables(self) -> Set[VariableIndex]:
        return {self.variable}

    def to_canonical(self) -> Dict[str, Any]:
        return {"type": "single_variable", "variable": self.variable.value}


@dataclass(frozen=True)
class VectorOfVariables(AbstractVectorFunction):
    """The function (x_i1, ..., x_ik)."""
    variables: Tuple[VariableIndex, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "variables", tuple(self.variables))

    @property
    def output_dimension(self) -> int:
        return len(self.variables)

    def evaluate(self, values: Values) -> np.ndarray:
        return np.array([values[v] for v in self.variables], dtype=np.float64)

    def referenced_variables(self) -> Set[VariableIndex]:
        return set(self.variables)

    def to_canonical(self) -> Dict[str, Any]:
        return {
            "type": "vector_of_variables",
            "variables": [v.value for v in self.variables],
        }


@dataclass(frozen=True)
class ScalarAffineFunction(AbstractScalarFunction):
    """The function sum_k a_k x_k + b."""
    terms: Tuple[ScalarAffineTerm, ...] = ()
    constant: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "terms", tuple(self.terms))

    def evaluate(self, values: Values) -> float:
        total = self.constant
        for t in self.terms:
            total += t.coefficient * values[t.variable]
        return float(total)

    def referenced_variables(self) -> Set[VariableIndex]:
        return {t.variable for t in self.terms}

    def canonical(self) -> 'ScalarAffineFunction':
        """Merge duplicate terms, drop zeros and sort by variable."""
        merged: Dict[VariableIndex, float] = {}
        for t in self.terms:
            merged[t.variable] = merged.get(t.variable, 0.0) + t.coefficient
        terms = tuple(
            ScalarAffineTerm(c, v) for v, c in sorted(merged.items()) if c != 0.0
        )
        return ScalarAffineFunction(terms, self.constant)

    def to_canonical(self) -> Dict[str, Any]:
        f = self.canonical()
        return {
            "type": "scalar_affine",
            "terms": [[t.coefficient, t.variable.value] for t in f.terms],
            "constant": f.constant,
        }


@dataclass(frozen=True)
class ScalarQuadraticFunction(AbstractScalarFunction):
    """The function sum_k q_k x_ik x_jk + sum_k a_k x_k + b."""
    affine_terms: Tuple[ScalarAffineTerm, ...] = ()
    quadratic_terms: Tuple[ScalarQuadraticTerm, ...] = ()
    constant: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "affine_terms", tuple(self.affine_terms))
        object.__setattr__(self, "quadratic_terms", tuple(self.quadratic_terms))

    def evaluate(self, values: Values) -> float:
        total = self.constant
        for t in self.affine_terms:
            total += t.coefficient * values[t.variable]
        for q in self.quadratic_terms:
            total += q.coefficient * values[q.variable_1] * values[q.variable_2]
        return float(total)

    def referenced_variables(self) -> Set[VariableIndex]:
        out = {t.variable for t in self.affine_terms}
        for q in self.quadratic_terms:
            out.add(q.variable_1)
            out.add(q.variable_2)
        return out

    def canonical(self) -> 'ScalarQuadraticFunction':
        affine = ScalarAffineFunction(self.affine_terms).canonical().terms
        merged: Dict[Tuple[VariableIndex, VariableIndex], float] = {}
        for q in self.quadratic_terms:
            key = tuple(sorted((q.variable_1, q.variable_2)))
            merged[key] = merged.get(key, 0.0) + q.coefficient
        quadratic = tuple(
            ScalarQuadraticTerm(c, k[0], k[1])
            for k, c in sorted(merged.items()) if c != 0.0
        )
        return ScalarQuadraticFunction(affine, quadratic, self.constant)

    def to_canonical(self) -> Dict[str, Any]:
        f = self.canonical()
        return {
            "type": "scalar_quadratic",
            "affine_terms": [[t.coefficient, t.variable.value] for t in f.affine_terms],
            "quadratic_terms": [
                [q.coefficient, q.variable_1.value, q.variable_2.value]
                for q in f.quadratic_terms
            ],
            "constant": f.constant,
        }


@dataclass(frozen=True)
class VectorAffineFunction(AbstractVectorFunction):
    """The function A x + b."""
    terms: Tuple[VectorAffineTerm, ...] = ()
    constants: Tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "terms", tuple(self.terms))
        object.__setattr__(
            self, "constants", tuple(float(c) for c in self.constants)
        )
        for t in self.terms:
            if not 0 <= t.output_index < len(self.constants):
                raise ValueError(
                    f"Output index {t.output_index} out of range for "
                    f"dimension {len(self.constants)}"
                )

    @property
    def output_dimension(self) -> int:
        return len(self.constants)

    def evaluate(self, values: Values) -> np.ndarray:
        out = np.array(self.constants, dtype=np.float64)
        for t in self.terms:
            out[t.output_index] += t.scalar_term.coefficient * values[t.scalar_term.variable]
        return out

    def referenced_variables(self) -> Set[VariableIndex]:
        return {t.scalar_term.variable for t in self.terms}

    def canonical(self) -> 'VectorAffineFunction':
        merged: Dict[Tuple[int, VariableIndex], float] = {}
        for t in self.terms:
            key = (t.output_index, t.scalar_term.variable)
            merged[key] = merged.get(key, 0.0) + t.scalar_term.coefficient
        terms = tuple(
            VectorAffineTerm(k[0], ScalarAffineTerm(c, k[1]))
            for k, c in sorted(merged.items()) if c != 0.0
        )
        return VectorAffineFunction(terms, self.constants)

    def to_canonical(self) -> Dict[str, Any]:
        f = self.canonical()
        return {
            "type": "vector_affine",
            "terms": [
                [t.output_index, t.scalar_term.coefficient, t.scalar_term.variable.value]
                for t in f.terms
            ],
            "constants": list(f.constants),
        }


# ---------------------------------------------------------------------------
# Function algebra
# ---------------------------------------------------------------------------

def to_affine(f: AbstractFunction) -> AbstractFunction:
    """Convert variable functions to the equivalent affine function."""
    if isinstance(f, SingleVariable):
        return ScalarAffineFunction((ScalarAffineTerm(1.0, f.variable),), 0.0)
    if isinstance(f, VectorOfVariables):
        terms = [
            VectorAffineTerm(i, ScalarAffineTerm(1.0, v))
            for i, v in enumerate(f.variables)
        ]
        return VectorAffineFunction(terms, [0.0] * len(f.variables))
    return f


def negate(f: AbstractFunction) -> AbstractFunction:
    """Return -f."""
    if isinstance(f, (SingleVariable, VectorOfVariables)):
        f = to_affine(f)
    if isinstance(f, ScalarAffineFunction):
        return ScalarAffineFunction(
            [ScalarAffineTerm(-t.coefficient, t.variable) for t in f.terms],
            -f.constant,
        )
    if isinstance(f, ScalarQuadraticFunction):
        return ScalarQuadraticFunction(
            [ScalarAffineTerm(-t.coefficient, t.variable) for t in f.affine_terms],
            [ScalarQuadraticTerm(-q.coefficient, q.variable_1, q.variable_2)
             for q in f.quadratic_terms],
            -f.constant,
        )
    if isinstance(f, VectorAffineFunction):
        return apply_linear_map(-np.eye(f.output_dimension), f)
    raise ValueError(f"Cannot negate {type(f).__name__}")


def function_constant(f: AbstractFunction) -> Union[float, np.ndarray]:
    """Constant term of f (zero for variable functions)."""
    if isinstance(f, SingleVariable):
        return 0.0
    if isinstance(f, VectorOfVariables):
        return np.zeros(f.output_dimension)
    if isinstance(f, (ScalarAffineFunction, ScalarQuadraticFunction)):
        return f.constant
    if isinstance(f, VectorAffineFunction):
        return np.array(f.constants, dtype=np.float64)
    raise ValueError(f"Unknown function type: {type(f).__name__}")


def with_constant(f: AbstractScalarFunction, constant: float) -> AbstractScalarFunction:
    """Return f with its constant replaced."""
    if isinstance(f, ScalarAffineFunction):
        return ScalarAffineFunction(f.terms, constant)
    if isinstance(f, ScalarQuadraticFunction):
        return ScalarQuadraticFunction(f.affine_terms, f.quadratic_terms, constant)
    raise ValueError(f"{type(f).__name__} has no constant")


def add_affine_term(f: AbstractScalarFunction, coefficient: float,
                    variable: VariableIndex) -> AbstractScalarFunction:
    """Return f + coefficient * variable."""
    f = to_affine(f)
    term = ScalarAffineTerm(coefficient, variable)
    if isinstance(f, ScalarAffineFunction):
        return ScalarAffineFunction(f.terms + (term,), f.constant)
    if isinstance(f, ScalarQuadraticFunction):
        return ScalarQuadraticFunction(
            f.affine_terms + (term,), f.quadratic_terms, f.constant
        )
    raise ValueError(f"Cannot add a term to {type(f).__name__}")


def vectorize(functions: Sequence[AbstractScalarFunction]) -> VectorAffineFunction:
    """Stack scalar affine functions into one vector affine function."""
    terms: List[VectorAffineTerm] = []
    constants: List[float] = []
    for i, f in enumerate(functions):
        f = to_affine(f)
        if not isinstance(f, ScalarAffineFunction):
            raise ValueError(f"Cannot vectorize {type(f).__name__}")
        terms.extend(VectorAffineTerm(i, t) for t in f.terms)
        constants.append(f.constant)
    return VectorAffineFunction(terms, constants)


def scalarize(f: AbstractVectorFunction) -> List[ScalarAffineFunction]:
    """Split a vector function into one scalar affine function per row."""
    f = to_affine(f)
    rows: List[List[ScalarAffineTerm]] = [[] for _ in range(f.output_dimension)]
    for t in f.terms:
        rows[t.output_index].append(t.scalar_term)
    return [
        ScalarAffineFunction(rows[i], f.constants[i])
        for i in range(f.output_dimension)
    ]


def apply_linear_map(matrix: np.ndarray, f: AbstractVectorFunction,
                     atol: float = 0.0) -> VectorAffineFunction:
    """
    Compute A f for a matrix A with f.output_dimension columns.

    Args:
        matrix: Array of shape (m, n)
        f: Vector function with n outputs
        atol: Coefficients and constants at most atol in magnitude are zeroed

    Returns:
        Vector affine function with m outputs
    """
    A = np.asarray(matrix, dtype=np.float64)
    f = to_affine(f)
    if A.ndim != 2 or A.shape[1] != f.output_dimension:
        raise ValueError(
            f"Matrix of shape {A.shape} cannot be applied to a function "
            f"of dimension {f.output_dimension}"
        )
    rows_by_output: Dict[int, List[ScalarAffineTerm]] = {}
    for t in f.terms:
        rows_by_output.setdefault(t.output_index, []).append(t.scalar_term)
    terms: List[VectorAffineTerm] = []
    for r in range(A.shape[0]):
        for i in np.flatnonzero(A[r]):
            for st in rows_by_output.get(int(i), ()):
                terms.append(VectorAffineTerm(
                    r, ScalarAffineTerm(float(A[r, i]) * st.coefficient, st.variable)
                ))
    constants = A @ np.array(f.constants, dtype=np.float64)
    constants[np.abs(constants) <= atol] = 0.0
    mapped = VectorAffineFunction(terms, constants.tolist()).canonical()
    if atol > 0.0:
        mapped = VectorAffineFunction(
            [t for t in mapped.terms if abs(t.scalar_term.coefficient) > atol],
            mapped.constants,
        )
    return mapped


def remove_variable(f: AbstractFunction, variable: VariableIndex) -> AbstractFunction:
    """Return f with every term involving variable dropped."""
    if isinstance(f, ScalarAffineFunction):
        return ScalarAffineFunction(
            [t for t in f.terms if t.variable != variable], f.constant
        )
    if isinstance(f, ScalarQuadraticFunction):
        return ScalarQuadraticFunction(
            [t for t in f.affine_terms if t.variable != variable],
            [q for q in f.quadratic_terms
             if variable not in (q.variable_1, q.variable_2)],
            f.constant,
        )
    if isinstance(f, VectorAffineFunction):
        return VectorAffineFunction(
            [t for t in f.terms if t.scalar_term.variable != variable],
            f.constants,
        )
    if isinstance(f, VectorOfVariables):
        return VectorOfVariables([v for v in f.variables if v != variable])
    raise ValueError(f"Cannot remove a variable from {type(f).__name__}")


def canonical(f: AbstractFunction) -> AbstractFunction:
    """Canonical form of f, suitable for equality comparison."""
    if hasattr(f, "canonical"):
        return f.canonical()
    return f


def is_variable_function(f: Union[AbstractFunction, type]) -> bool:
    ftype = f if isinstance(f, type) else type(f)
    return issubclass(ftype, (SingleVariable, VectorOfVariables))


def affine_function(coefficients: Iterable[float],
                    variables: Iterable[VariableIndex],
                    constant: float = 0.0) -> ScalarAffineFunction:
    """Build sum_k c_k x_k + constant from parallel sequences."""
    terms = [ScalarAffineTerm(float(c), v) for c, v in zip(coefficients, variables)]
    return ScalarAffineFunction(terms, constant)


def convert_function(f: AbstractFunction, function_type: type) -> AbstractFunction:
    """
    Express f as a function_type.

    Affine functions convert back to variable functions only when every
    row is exactly one variable with coefficient one and no constant.
    """
    if isinstance(f, function_type):
        return f
    if function_type in (ScalarAffineFunction, VectorAffineFunction):
        return to_affine(f)
    if function_type is ScalarQuadraticFunction and isinstance(f, (SingleVariable, ScalarAffineFunction)):
        f = to_affine(f)
        return ScalarQuadraticFunction(f.terms, (), f.constant)
    if function_type is SingleVariable and isinstance(f, ScalarAffineFunction):
        f = f.canonical()
        if (abs(f.constant) <= _UNIT_TOL and len(f.terms) == 1
                and abs(f.terms[0].coefficient - 1.0) <= _UNIT_TOL):
            return SingleVariable(f.terms[0].variable)
    if function_type is VectorOfVariables and isinstance(f, VectorAffineFunction):
        f = f.canonical()
        rows = {}
        for t in f.terms:
            rows.setdefault(t.output_index, []).append(t.scalar_term)
        if (all(abs(c) <= _UNIT_TOL for c in f.constants)
                and len(rows) == f.output_dimension
                and all(len(r) == 1 and abs(r[0].coefficient - 1.0) <= _UNIT_TOL
                        for r in rows.values())):
            return VectorOfVariables([rows[i][0].variable for i in range(f.output_dimension)])
    raise ValueError(f"Cannot convert {type(f).__name__} to {function_type.__name__}")

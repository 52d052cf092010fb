"""
Scalar root finding.

Bracketing methods:
    bisection, regula_falsi

Open methods:
    newton_raphson, secant

Unified interface:
    root_scalar

Results:
    RootResult, RootStatus

Exceptions:
    RootFindingError, BracketError, StallError, DivergenceError,
    ConvergenceError, RootFindingWarning
"""

from ._bisection import bisection
from ._convergence import (
    MAX_ITERATIONS,
    STALL_TOLERANCE,
    TOLERANCE,
    check_convergence,
    default_tolerances,
)
from ._exceptions import (
    BracketError,
    ConvergenceError,
    DivergenceError,
    RootFindingError,
    RootFindingWarning,
    StallError,
)
from ._newton_raphson import newton_raphson
from ._regula_falsi import regula_falsi
from ._result import RootResult, RootStatus
from ._root_scalar import root_scalar
from ._secant import secant

__all__ = [
    # Bracketing
    "bisection",
    "regula_falsi",
    # Open
    "newton_raphson",
    "secant",
    # Unified
    "root_scalar",
    # Results
    "RootResult",
    "RootStatus",
    # Convergence
    "MAX_ITERATIONS",
    "STALL_TOLERANCE",
    "TOLERANCE",
    "check_convergence",
    "default_tolerances",
    # Exceptions
    "BracketError",
    "ConvergenceError",
    "DivergenceError",
    "RootFindingError",
    "RootFindingWarning",
    "StallError",
]

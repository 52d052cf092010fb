"""Exception classes for root finding module."""


class RootFindingError(Exception):
    """Base exception for root finding errors."""

    pass


class BracketError(RootFindingError):
    """Raised when bracket doesn't contain sign change."""

    pass


class StallError(RootFindingError):
    """Raised when an update denominator collapses (zero derivative or
    equal function values)."""

    pass


class DivergenceError(RootFindingError):
    """Raised when an iterate leaves the validity interval."""

    pass


class ConvergenceError(RootFindingError):
    """Raised when the iteration limit is reached without converging."""

    pass


class RootFindingWarning(UserWarning):
    """Warning for root finding issues (e.g., best-effort exhaustion)."""

    pass

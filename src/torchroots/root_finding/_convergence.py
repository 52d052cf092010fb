"""Convergence utilities for root finding."""

import warnings

import torch
from torch import Tensor

from ._exceptions import RootFindingWarning

TOLERANCE = 1e-6
MAX_ITERATIONS = 1_000_000
STALL_TOLERANCE = 1e-12

_EXHAUSTION_POLICIES = ("best_effort", "fail")


def default_tolerances(dtype: torch.dtype) -> dict[str, float]:
    """Return dtype-appropriate default tolerances.

    Parameters
    ----------
    dtype : torch.dtype
        The tensor dtype.

    Returns
    -------
    dict[str, float]
        Dictionary with keys 'xtol' and 'ftol'.
    """
    if dtype in (torch.float16, torch.bfloat16):
        return {"xtol": 1e-3, "ftol": 1e-3}
    else:  # float32, float64
        return {"xtol": TOLERANCE, "ftol": TOLERANCE}


def check_convergence(
    x_old: Tensor,
    x_new: Tensor,
    f_new: Tensor,
    xtol: float,
    ftol: float,
) -> Tensor:
    """Check convergence for each element.

    Convergence is achieved when EITHER:
    - |x_new - x_old| < xtol (step converged)
    - |f_new| < ftol (residual converged)

    Parameters
    ----------
    x_old : Tensor
        Previous x values.
    x_new : Tensor
        Current x values.
    f_new : Tensor
        Function values at ``x_new``.
    xtol : float
        Absolute tolerance on x.
    ftol : float
        Tolerance on function value.

    Returns
    -------
    Tensor
        Boolean mask where True indicates convergence.
    """
    x_converged = torch.abs(x_new - x_old) < xtol
    f_converged = torch.abs(f_new) < ftol
    return x_converged | f_converged


def resolve_on_exhaustion(on_exhaustion: str | None, default: str) -> str:
    """Validate an ``on_exhaustion`` option, falling back to ``default``."""
    if on_exhaustion is None:
        return default
    if on_exhaustion not in _EXHAUSTION_POLICIES:
        raise ValueError(
            f"on_exhaustion must be one of {_EXHAUSTION_POLICIES}, "
            f"got {on_exhaustion!r}"
        )
    return on_exhaustion


def finish_exhausted(
    method: str,
    active: Tensor,
    estimate: Tensor,
    root: Tensor,
    converged: Tensor,
    *,
    on_exhaustion: str,
    maxiter: int,
) -> tuple[Tensor, Tensor]:
    """Apply the exhaustion policy to elements still iterating.

    Elements in ``active`` ran out of iterations. Their root becomes the
    current ``estimate``. Under ``"best_effort"`` they are also reported as
    converged, and a :class:`RootFindingWarning` is issued.

    Returns
    -------
    tuple[Tensor, Tensor]
        (root, converged) with the policy applied.
    """
    root = torch.where(active, estimate, root)

    if on_exhaustion == "best_effort" and torch.any(active):
        warnings.warn(
            f"{method} reached maxiter={maxiter} without meeting the "
            f"tolerance for {int(active.sum())} of {active.numel()} "
            f"elements; returning best estimates.",
            RootFindingWarning,
            stacklevel=3,
        )
        converged = converged | active

    return root, converged

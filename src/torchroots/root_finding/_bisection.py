"""Bisection bracketed root-finding method."""

from typing import Callable

import torch
from torch import Tensor

from ._convergence import (
    MAX_ITERATIONS,
    default_tolerances,
    finish_exhausted,
    resolve_on_exhaustion,
)
from ._result import RootResult, RootStatus
from ._validation import as_float_tensors, check_maxiter, order_bounds


def bisection(
    f: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    *,
    xtol: float | None = None,
    ftol: float | None = None,
    maxiter: int = MAX_ITERATIONS,
    on_exhaustion: str | None = None,
) -> RootResult:
    """
    Find roots of f(x) = 0 using the bisection method.

    Each iteration evaluates f at the midpoint of the bracket and keeps the
    half whose endpoints still carry a sign change, so the bracket width
    halves exactly every iteration.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Element-wise function. Takes a tensor of the broadcast shape of
        ``a`` and ``b`` and returns a tensor of the same shape. Must be
        continuous on [a, b].
    a, b : Tensor or float
        Bracket endpoints. Broadcast together; the order of the endpoints
        does not matter.
    xtol : float, optional
        Tolerance on the bracket width, ``|b - a| < xtol``.
        Default: 1e-6 (1e-3 for float16/bfloat16).
    ftol : float, optional
        Tolerance on the residual, ``|f(c)| < ftol``.
        Default: same as xtol.
    maxiter : int, default=1_000_000
        Maximum iterations.
    on_exhaustion : {"best_effort", "fail"}, optional
        Outcome for elements still iterating after ``maxiter``.
        Default: ``"best_effort"``, which reports the last midpoint as
        converged and issues a :class:`RootFindingWarning`.

    Returns
    -------
    RootResult
        ``(converged, root, status, num_iterations)``, each with the
        broadcast shape of ``a`` and ``b``.

    Raises
    ------
    ValueError
        If ``a`` and ``b`` do not broadcast, contain NaN/Inf, if f returns
        NaN/Inf at the endpoints, or if an option is invalid.

    Examples
    --------
    Find the square root of 2 (solve x^2 - 2 = 0):

    >>> from torchroots.root_finding import bisection
    >>> result = bisection(lambda x: x**2 - 2, 0.0, 2.0)
    >>> bool(result.converged)
    True
    >>> f"{float(result.root):.5f}"
    '1.41421'

    No sign change in the bracket:

    >>> result = bisection(lambda x: x**2 + 1, -1.0, 1.0)
    >>> bool(result.converged)
    False

    Notes
    -----
    **Endpoints**: If ``f(a)`` or ``f(b)`` is exactly zero, that endpoint is
    returned without iterating. Otherwise ``f(a)`` and ``f(b)`` must have
    opposite signs; elements violating this finish with
    ``RootStatus.INVALID_BRACKET`` and a NaN root.

    **Cost**: f is evaluated twice at entry and once per iteration. Endpoint
    values are cached, never re-evaluated.

    See Also
    --------
    regula_falsi : Bracketed method using the secant-line intercept.
    scipy.optimize.bisect : SciPy's scalar bisection.
    """
    check_maxiter(maxiter)
    on_exhaustion = resolve_on_exhaustion(on_exhaustion, "best_effort")

    a, b = as_float_tensors(a=a, b=b)
    a, b = order_bounds(a, b)

    defaults = default_tolerances(a.dtype)
    if xtol is None:
        xtol = defaults["xtol"]
    if ftol is None:
        ftol = defaults["ftol"]

    fa = f(a)
    fb = f(b)

    if torch.any(~torch.isfinite(fa)) or torch.any(~torch.isfinite(fb)):
        raise ValueError("Function returned NaN or Inf at bracket endpoints")

    at_endpoint = (fa == 0) | (fb == 0)
    invalid = ~at_endpoint & (torch.sign(fa) * torch.sign(fb) >= 0)

    no_root = torch.full_like(a, torch.nan)
    root = torch.where(fa == 0, a, torch.where(fb == 0, b, no_root))
    converged = at_endpoint.clone()
    status = torch.full(
        a.shape, RootStatus.EXHAUSTED, dtype=torch.int64, device=a.device
    )
    status = status.masked_fill(at_endpoint, RootStatus.CONVERGED)
    status = status.masked_fill(invalid, RootStatus.INVALID_BRACKET)
    num_iterations = torch.zeros(a.shape, dtype=torch.int64, device=a.device)

    active = ~(at_endpoint | invalid)
    c = (a + b) / 2

    for _ in range(maxiter):
        if not torch.any(active):
            break

        c = torch.where(active, (a + b) / 2, c)
        fc = f(c)
        num_iterations = num_iterations + active.long()

        # Width of the bracket c was taken from
        newly_converged = active & (
            (torch.abs(fc) < ftol) | (torch.abs(b - a) < xtol)
        )
        root = torch.where(newly_converged, c, root)
        converged = converged | newly_converged
        status = status.masked_fill(newly_converged, RootStatus.CONVERGED)
        active = active & ~newly_converged

        # Sign change in [a, c] keeps the left half
        keep_left = active & (torch.sign(fc) * torch.sign(fa) < 0)
        keep_right = active & ~keep_left
        b = torch.where(keep_left, c, b)
        fb = torch.where(keep_left, fc, fb)
        a = torch.where(keep_right, c, a)
        fa = torch.where(keep_right, fc, fa)

    root, converged = finish_exhausted(
        "bisection",
        active,
        c,
        root,
        converged,
        on_exhaustion=on_exhaustion,
        maxiter=maxiter,
    )

    return RootResult(converged, root, status, num_iterations)

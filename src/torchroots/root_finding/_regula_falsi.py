"""Regula falsi (false position) bracketed root-finding method."""

from typing import Callable

import torch
from torch import Tensor

from ._convergence import (
    MAX_ITERATIONS,
    STALL_TOLERANCE,
    default_tolerances,
    finish_exhausted,
    resolve_on_exhaustion,
)
from ._result import RootResult, RootStatus
from ._validation import as_float_tensors, check_maxiter, order_bounds


def regula_falsi(
    f: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    *,
    xtol: float | None = None,
    ftol: float | None = None,
    maxiter: int = MAX_ITERATIONS,
    stall_tol: float = STALL_TOLERANCE,
    on_exhaustion: str | None = None,
) -> RootResult:
    """
    Find roots of f(x) = 0 using the regula falsi (false position) method.

    The new point is the x-intercept of the line through (a, f(a)) and
    (b, f(b)):

        c = a - f(a) * (b - a) / (f(b) - f(a))

    and the bracket is updated with the same sign test as bisection.

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
    stall_tol : float, default=1e-12
        Elements with ``|f(b) - f(a)| < stall_tol`` stop with
        ``RootStatus.STALLED``.
    on_exhaustion : {"best_effort", "fail"}, optional
        Outcome for elements still iterating after ``maxiter``.
        Default: ``"fail"``.

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
    >>> from torchroots.root_finding import regula_falsi
    >>> result = regula_falsi(lambda x: x**3 - x - 2, 1.0, 2.0)
    >>> f"{float(result.root):.5f}"
    '1.52138'

    Notes
    -----
    **Out-of-bracket intercepts**: When rounding puts ``c`` outside the open
    interval ``(a, b)``, the bisection midpoint is used for that iteration.

    **Slow convergence**: For convex or concave f one endpoint may never
    move, so the bracket width does not shrink to zero. Such elements
    converge through the residual criterion or run to ``maxiter``.

    See Also
    --------
    bisection : Bracketed method with guaranteed width halving.
    """
    check_maxiter(maxiter)
    on_exhaustion = resolve_on_exhaustion(on_exhaustion, "fail")

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

        denom = fb - fa
        stalled = active & (torch.abs(denom) < stall_tol)
        root = torch.where(stalled, c, root)
        status = status.masked_fill(stalled, RootStatus.STALLED)
        active = active & ~stalled

        if not torch.any(active):
            break

        safe_denom = torch.where(active, denom, torch.ones_like(denom))
        c_new = a - fa * (b - a) / safe_denom

        outside = ~((c_new > a) & (c_new < b))
        c_new = torch.where(outside, (a + b) / 2, c_new)
        c = torch.where(active, c_new, c)

        fc = f(c)
        num_iterations = num_iterations + active.long()

        newly_converged = active & (
            (torch.abs(fc) < ftol) | (torch.abs(b - a) < xtol)
        )
        root = torch.where(newly_converged, c, root)
        converged = converged | newly_converged
        status = status.masked_fill(newly_converged, RootStatus.CONVERGED)
        active = active & ~newly_converged

        keep_left = active & (torch.sign(fc) * torch.sign(fa) < 0)
        keep_right = active & ~keep_left
        b = torch.where(keep_left, c, b)
        fb = torch.where(keep_left, fc, fb)
        a = torch.where(keep_right, c, a)
        fa = torch.where(keep_right, fc, fa)

    root, converged = finish_exhausted(
        "regula_falsi",
        active,
        c,
        root,
        converged,
        on_exhaustion=on_exhaustion,
        maxiter=maxiter,
    )

    return RootResult(converged, root, status, num_iterations)

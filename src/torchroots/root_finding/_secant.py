"""Secant root finding method."""

from typing import Callable

import torch
from torch import Tensor

from ._convergence import (
    MAX_ITERATIONS,
    STALL_TOLERANCE,
    check_convergence,
    default_tolerances,
    finish_exhausted,
    resolve_on_exhaustion,
)
from ._result import RootResult, RootStatus
from ._validation import as_float_tensors, check_maxiter, order_bounds


def secant(
    f: Callable[[Tensor], Tensor],
    a: Tensor | float,
    b: Tensor | float,
    initial_guess: Tensor | float,
    *,
    xtol: float | None = None,
    ftol: float | None = None,
    maxiter: int = MAX_ITERATIONS,
    stall_tol: float = STALL_TOLERANCE,
    on_exhaustion: str | None = None,
) -> RootResult:
    """
    Find roots of f(x) = 0 using the Secant method.

    The Secant method approximates the derivative using finite differences:
    x_{n+1} = x_n - f(x_n) * (x_n - x_{n-1}) / (f(x_n) - f(x_{n-1}))

    The first pair of iterates is ``(a, initial_guess)``.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Element-wise function. Takes a tensor of the broadcast shape of the
        inputs and returns a tensor of the same shape.
    a, b : Tensor or float
        Validity interval, not required to bracket a root. The lower bound
        is also the first seed point.
    initial_guess : Tensor or float
        Second seed point.
    xtol : float, optional
        Tolerance on the step, ``|x_{n+1} - x_n| < xtol``.
        Default: 1e-6 (1e-3 for float16/bfloat16).
    ftol : float, optional
        Tolerance on the residual, ``|f(x_{n+1})| < ftol``.
        Default: same as xtol.
    maxiter : int, default=1_000_000
        Maximum iterations.
    stall_tol : float, default=1e-12
        Elements with ``|f(x_n) - f(x_{n-1})| < stall_tol`` stop with
        ``RootStatus.STALLED``.
    on_exhaustion : {"best_effort", "fail"}, optional
        Outcome for elements still iterating after ``maxiter``.
        Default: ``"fail"``. The root holds the last iterate either way.

    Returns
    -------
    RootResult
        ``(converged, root, status, num_iterations)``, each with the
        broadcast shape of the inputs.

    Examples
    --------
    Solve cos(x) = x:

    >>> import torch
    >>> from torchroots.root_finding import secant
    >>> result = secant(lambda x: torch.cos(x) - x, 0.0, 1.0, 0.5)
    >>> f"{float(result.root):.6f}"
    '0.739085'

    Notes
    -----
    **Midpoint fallback**: When the secant update leaves [a, b], the
    midpoint ``(a + b) / 2`` is used as the next iterate and iteration
    continues. Such a substituted step converges only through the residual
    criterion. Compare :func:`newton_raphson`, which fails instead.

    **Cost**: f is evaluated twice at entry and once per iteration.

    See Also
    --------
    newton_raphson : Derivative-based open method.
    scipy.optimize.newton : SciPy's Newton implementation (secant mode)
    """
    check_maxiter(maxiter)
    on_exhaustion = resolve_on_exhaustion(on_exhaustion, "fail")

    a, b, x_curr = as_float_tensors(a=a, b=b, initial_guess=initial_guess)
    a, b = order_bounds(a, b)

    defaults = default_tolerances(x_curr.dtype)
    if xtol is None:
        xtol = defaults["xtol"]
    if ftol is None:
        ftol = defaults["ftol"]

    x_prev = a.clone()
    midpoint = (a + b) / 2

    f_prev = f(x_prev)
    f_curr = f(x_curr)

    root = x_curr.clone()
    converged = torch.zeros(
        x_curr.shape, dtype=torch.bool, device=x_curr.device
    )
    status = torch.full(
        x_curr.shape,
        RootStatus.EXHAUSTED,
        dtype=torch.int64,
        device=x_curr.device,
    )
    num_iterations = torch.zeros(
        x_curr.shape, dtype=torch.int64, device=x_curr.device
    )

    active = torch.ones(x_curr.shape, dtype=torch.bool, device=x_curr.device)

    for _ in range(maxiter):
        if not torch.any(active):
            break

        denom = f_curr - f_prev
        stalled = active & (torch.abs(denom) < stall_tol)
        root = torch.where(stalled, x_curr, root)
        status = status.masked_fill(stalled, RootStatus.STALLED)
        active = active & ~stalled

        if not torch.any(active):
            break

        safe_denom = torch.where(active, denom, torch.ones_like(denom))
        x_new = x_curr - f_curr * (x_curr - x_prev) / safe_denom

        # NaN updates also take the midpoint
        outside = ~((x_new >= a) & (x_new <= b))
        x_new = torch.where(outside, midpoint, x_new)
        x_new = torch.where(active, x_new, x_curr)

        f_new = f(x_new)
        num_iterations = num_iterations + active.long()

        step_or_residual = check_convergence(x_curr, x_new, f_new, xtol, ftol)
        residual_only = torch.abs(f_new) < ftol
        newly_converged = active & torch.where(
            outside, residual_only, step_or_residual
        )
        root = torch.where(newly_converged, x_new, root)
        converged = converged | newly_converged
        status = status.masked_fill(newly_converged, RootStatus.CONVERGED)
        active = active & ~newly_converged

        x_prev = torch.where(active, x_curr, x_prev)
        f_prev = torch.where(active, f_curr, f_prev)
        x_curr = torch.where(active, x_new, x_curr)
        f_curr = torch.where(active, f_new, f_curr)

    root, converged = finish_exhausted(
        "secant",
        active,
        x_curr,
        root,
        converged,
        on_exhaustion=on_exhaustion,
        maxiter=maxiter,
    )

    return RootResult(converged, root, status, num_iterations)

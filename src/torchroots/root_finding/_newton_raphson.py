"""Newton-Raphson root finding method."""

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


def _evaluate_with_derivative(
    f: Callable[[Tensor], Tensor],
    x: Tensor,
    *,
    g: Callable[[Tensor], Tensor] | None = None,
) -> tuple[Tensor, Tensor]:
    """Evaluate f and its derivative at x.

    When ``g`` is None the derivative comes from autograd. Since f is
    element-wise, the gradient of ``sum(f(x))`` w.r.t. x is
    ``[f'(x_1), f'(x_2), ...]``.
    """
    if g is not None:
        return f(x), g(x)

    x_grad = x.detach().requires_grad_(True)
    with torch.enable_grad():
        fx = f(x_grad)
        (grad,) = torch.autograd.grad(
            fx.sum(),
            x_grad,
            allow_unused=True,
        )
    if grad is None:
        # f does not depend on x
        grad = torch.zeros_like(x)
    return fx.detach(), grad


def newton_raphson(
    f: Callable[[Tensor], Tensor],
    g: Callable[[Tensor], Tensor] | None,
    a: Tensor | float,
    b: Tensor | float,
    initial_guess: Tensor | float,
    *,
    xtol: float | None = None,
    maxiter: int = MAX_ITERATIONS,
    stall_tol: float = STALL_TOLERANCE,
    on_exhaustion: str | None = None,
) -> RootResult:
    """
    Find roots of f(x) = 0 using the Newton-Raphson method.

    Newton's method uses the iteration x_{n+1} = x_n - f(x_n) / f'(x_n).
    It converges quadratically near a simple root but has no global
    guarantee; the interval [a, b] is the only guard against runaway
    iterates.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Element-wise function. Takes a tensor of the broadcast shape of the
        inputs and returns a tensor of the same shape.
    g : Callable[[Tensor], Tensor] or None
        Derivative of f. If None, the derivative is computed with autograd,
        in which case f must be differentiable by torch.
    a, b : Tensor or float
        Validity interval. An iterate leaving [a, b] stops that element
        with ``RootStatus.DIVERGED``. Not required to bracket a root.
    initial_guess : Tensor or float
        Starting point.
    xtol : float, optional
        Tolerance on the step, ``|x_{n+1} - x_n| < xtol``.
        Default: 1e-6 (1e-3 for float16/bfloat16).
    maxiter : int, default=1_000_000
        Maximum iterations.
    stall_tol : float, default=1e-12
        Elements with ``|f'(x)| < stall_tol`` stop with
        ``RootStatus.STALLED``.
    on_exhaustion : {"best_effort", "fail"}, optional
        Outcome for elements still iterating after ``maxiter``.
        Default: ``"fail"``.

    Returns
    -------
    RootResult
        ``(converged, root, status, num_iterations)``, each with the
        broadcast shape of the inputs.

    Examples
    --------
    >>> from torchroots.root_finding import newton_raphson
    >>> f = lambda x: x**3 - x - 2
    >>> g = lambda x: 3 * x**2 - 1
    >>> result = newton_raphson(f, g, 1.0, 2.0, 1.5)
    >>> f"{float(result.root):.6f}"
    '1.521380'

    Using autograd for the derivative:

    >>> result = newton_raphson(f, None, 1.0, 2.0, 1.5)
    >>> bool(result.converged)
    True

    Notes
    -----
    **No fallback**: A step that leaves [a, b] is not clamped or replaced;
    the element fails and its root holds the last iterate inside the
    interval. Compare :func:`secant`, which substitutes the midpoint.

    **Convergence Criterion**: Only the step size is tested, not the
    residual.

    See Also
    --------
    secant : Derivative-free open method.
    scipy.optimize.newton : SciPy's Newton implementation
    """
    check_maxiter(maxiter)
    on_exhaustion = resolve_on_exhaustion(on_exhaustion, "fail")

    a, b, x = as_float_tensors(a=a, b=b, initial_guess=initial_guess)
    a, b = order_bounds(a, b)

    if xtol is None:
        xtol = default_tolerances(x.dtype)["xtol"]

    root = x.clone()
    converged = torch.zeros(x.shape, dtype=torch.bool, device=x.device)
    status = torch.full(
        x.shape, RootStatus.EXHAUSTED, dtype=torch.int64, device=x.device
    )
    num_iterations = torch.zeros(x.shape, dtype=torch.int64, device=x.device)

    active = torch.ones(x.shape, dtype=torch.bool, device=x.device)

    for _ in range(maxiter):
        if not torch.any(active):
            break

        fx, gx = _evaluate_with_derivative(f, x, g=g)
        num_iterations = num_iterations + active.long()

        stalled = active & (torch.abs(gx) < stall_tol)
        root = torch.where(stalled, x, root)
        status = status.masked_fill(stalled, RootStatus.STALLED)
        active = active & ~stalled

        safe_gx = torch.where(active, gx, torch.ones_like(gx))
        x_next = torch.where(active, x - fx / safe_gx, x)

        # NaN steps fail both comparisons and count as leaving [a, b]
        diverged = active & ~((x_next >= a) & (x_next <= b))
        root = torch.where(diverged, x, root)
        status = status.masked_fill(diverged, RootStatus.DIVERGED)
        active = active & ~diverged

        newly_converged = active & (torch.abs(x_next - x) < xtol)
        root = torch.where(newly_converged, x_next, root)
        converged = converged | newly_converged
        status = status.masked_fill(newly_converged, RootStatus.CONVERGED)
        active = active & ~newly_converged

        x = torch.where(active, x_next, x)

    root, converged = finish_exhausted(
        "newton_raphson",
        active,
        x,
        root,
        converged,
        on_exhaustion=on_exhaustion,
        maxiter=maxiter,
    )

    return RootResult(converged, root, status, num_iterations)

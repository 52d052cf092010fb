"""Unified interface for scalar root finding."""

from typing import Callable, Optional

from torch import Tensor

from ._bisection import bisection
from ._newton_raphson import newton_raphson
from ._regula_falsi import regula_falsi
from ._result import RootResult
from ._secant import secant

_BRACKETING = {
    "bisection": bisection,
    "regula-falsi": regula_falsi,
    "false-position": regula_falsi,
}

_OPEN = {"newton-raphson", "newton", "secant"}


def root_scalar(
    f: Callable[[Tensor], Tensor],
    *,
    method: str = "bisection",
    bracket: Optional[tuple] = None,
    x0: Optional[Tensor | float] = None,
    fprime: Optional[Callable[[Tensor], Tensor]] = None,
    **kwargs,
) -> RootResult:
    r"""Unified interface for scalar root finding.

    Dispatches to the specified solver to find :math:`x` with
    :math:`f(x) = 0`.

    Parameters
    ----------
    f : Callable[[Tensor], Tensor]
        Element-wise function whose root is sought.
    method : str
        Root finding method: ``"bisection"`` (default),
        ``"regula-falsi"`` (alias ``"false-position"``),
        ``"newton-raphson"`` (alias ``"newton"``), or ``"secant"``.
        Case and underscores are ignored.
    bracket : tuple, optional
        ``(a, b)``. The bracket for bracketing methods and the validity
        interval for open methods. Required by every method.
    x0 : Tensor or float, optional
        Initial guess. Required by ``"newton-raphson"`` and ``"secant"``.
    fprime : Callable, optional
        Derivative of f, used by ``"newton-raphson"``. Autograd is used
        when omitted.
    **kwargs
        Additional keyword arguments passed to the solver.

    Returns
    -------
    RootResult
        Result with fields ``converged``, ``root``, ``status`` and
        ``num_iterations``.

    Raises
    ------
    ValueError
        If ``method`` is not recognized or a required input is missing.

    Examples
    --------
    >>> import torch
    >>> result = root_scalar(lambda x: x**2 - 2, bracket=(0.0, 2.0))
    >>> f"{float(result.root):.5f}"
    '1.41421'

    >>> result = root_scalar(
    ...     lambda x: torch.cos(x) - x,
    ...     method="secant",
    ...     bracket=(0.0, 1.0),
    ...     x0=0.5,
    ... )
    >>> bool(result.converged)
    True

    See Also
    --------
    bisection, regula_falsi, newton_raphson, secant
    """
    method_lower = method.lower().replace("_", "-")

    if method_lower not in _BRACKETING and method_lower not in _OPEN:
        raise ValueError(
            f"Unknown method {method!r}. Supported methods: 'bisection', "
            f"'regula-falsi', 'false-position', 'newton-raphson', "
            f"'newton', 'secant'."
        )

    if bracket is None:
        raise ValueError(f"method {method!r} requires bracket=(a, b)")
    a, b = bracket

    if method_lower in _BRACKETING:
        return _BRACKETING[method_lower](f, a, b, **kwargs)

    if x0 is None:
        raise ValueError(f"method {method!r} requires an initial guess x0")

    if method_lower == "secant":
        return secant(f, a, b, x0, **kwargs)

    return newton_raphson(f, fprime, a, b, x0, **kwargs)

from enum import IntEnum
from typing import NamedTuple

import torch
from torch import Tensor

from ._exceptions import (
    BracketError,
    ConvergenceError,
    DivergenceError,
    RootFindingError,
    StallError,
)


class RootStatus(IntEnum):
    """Per-element termination reason of a root finder."""

    CONVERGED = 0
    INVALID_BRACKET = 1
    STALLED = 2
    DIVERGED = 3
    EXHAUSTED = 4


_STATUS_ERRORS = {
    RootStatus.INVALID_BRACKET: (
        BracketError,
        "f(a) and f(b) must have opposite signs",
    ),
    RootStatus.STALLED: (
        StallError,
        "update denominator vanished (zero derivative or equal f values)",
    ),
    RootStatus.DIVERGED: (
        DivergenceError,
        "iterate left the interval [a, b]",
    ),
    RootStatus.EXHAUSTED: (
        ConvergenceError,
        "maxiter reached without meeting the tolerance",
    ),
}


class RootResult(NamedTuple):
    """Result of a root finding routine.

    Parameters
    ----------
    converged : Tensor
        Boolean success flag. Scalar or batch shape ``(...,)``.
    root : Tensor
        Root estimate, same shape as ``converged``. Meaningful where
        ``converged`` is True. Failed elements carry the last iterate, or
        NaN for an invalid bracket.
    status : Tensor
        :class:`RootStatus` code per element, ``int64``.
    num_iterations : Tensor
        Iterations performed per element, ``int64``.
    """

    converged: Tensor
    root: Tensor
    status: Tensor
    num_iterations: Tensor

    def raise_for_status(self) -> "RootResult":
        """Raise for the first element that did not converge.

        Returns
        -------
        RootResult
            ``self``, when every element converged.

        Raises
        ------
        RootFindingError
            The subclass matching the failing element's status.
        """
        failed = ~self.converged.reshape(-1)
        if not torch.any(failed):
            return self

        index = int(torch.nonzero(failed)[0])
        status = RootStatus(int(self.status.reshape(-1)[index]))
        error, reason = _STATUS_ERRORS.get(
            status, (RootFindingError, status.name.lower())
        )
        raise error(
            f"root finding failed for {int(failed.sum())} of "
            f"{failed.numel()} elements; first failure at index {index}: "
            f"{reason}"
        )

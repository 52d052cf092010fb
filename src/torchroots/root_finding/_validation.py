"""Input preparation shared by the root finders."""

import numbers

import torch
from torch import Tensor


def as_float_tensors(**values) -> tuple[Tensor, ...]:
    """Convert bounds and guesses to broadcast floating tensors.

    Floating tensors keep their dtype and integer tensors are promoted to
    ``float64``. Python numbers adopt the dtype of the tensor arguments, or
    ``float64`` when there are none. All values are broadcast to a common
    shape on the device of the first tensor argument.

    Raises
    ------
    ValueError
        If the values cannot be broadcast together or contain NaN or Inf.
    """
    device = None
    dtype = None
    for name, value in values.items():
        if isinstance(value, Tensor):
            value_dtype = (
                value.dtype if value.is_floating_point() else torch.float64
            )
            if dtype is None:
                dtype = value_dtype
                device = value.device
            else:
                dtype = torch.promote_types(dtype, value_dtype)
        elif not isinstance(value, numbers.Real):
            raise TypeError(
                f"{name} must be a real number or a Tensor, "
                f"got {type(value).__name__}"
            )

    if dtype is None:
        dtype = torch.float64

    tensors = [
        torch.as_tensor(value, dtype=dtype, device=device)
        for value in values.values()
    ]

    try:
        broadcast = torch.broadcast_tensors(*tensors)
    except RuntimeError as exc:
        shapes = ", ".join(
            f"{name}={tuple(t.shape)}" for name, t in zip(values, tensors)
        )
        raise ValueError(
            f"inputs must be broadcastable, got {shapes}"
        ) from exc

    broadcast = tuple(t.clone() for t in broadcast)

    for name, t in zip(values, broadcast):
        if torch.any(~torch.isfinite(t)):
            raise ValueError(f"{name} must not contain NaN or Inf")

    return broadcast


def check_maxiter(maxiter: int) -> None:
    if not isinstance(maxiter, numbers.Integral) or maxiter < 0:
        raise ValueError(
            f"maxiter must be a non-negative integer, got {maxiter!r}"
        )


def order_bounds(a: Tensor, b: Tensor) -> tuple[Tensor, Tensor]:
    """Return ``(lower, upper)`` element-wise."""
    return torch.minimum(a, b), torch.maximum(a, b)

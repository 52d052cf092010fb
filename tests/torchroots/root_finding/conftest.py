"""Test fixtures for root_finding tests."""

import pytest
import torch


class RecordingFunction:
    """Wrap an element-wise function and keep every point it is called at."""

    def __init__(self, f):
        self.f = f
        self.calls: list[torch.Tensor] = []

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        self.calls.append(x.detach().clone())
        return self.f(x)

    @property
    def num_calls(self) -> int:
        return len(self.calls)


@pytest.fixture
def recording():
    """Factory wrapping a function in a :class:`RecordingFunction`."""
    return RecordingFunction

# tests/torchroots/root_finding/test__root_scalar.py
import math

import pytest
import torch

from torchroots.root_finding import RootStatus, root_scalar


def f(x):
    return x**2 - 2


class TestRootScalar:
    """Tests for the unified root_scalar interface."""

    @pytest.mark.parametrize(
        "method",
        [
            "bisection",
            "regula-falsi",
            "regula_falsi",
            "false-position",
            "Newton-Raphson",
            "newton",
            "secant",
        ],
    )
    def test_methods(self, method):
        result = root_scalar(f, method=method, bracket=(0.0, 2.0), x0=1.5)

        assert result.converged
        assert abs(float(result.root) - math.sqrt(2)) < 1e-6

    def test_default_method_is_bisection(self, recording):
        g = recording(f)

        root_scalar(g, bracket=(0.0, 2.0))

        # Bisection evaluates the endpoints, then the midpoint
        assert float(g.calls[2]) == 1.0

    def test_fprime_is_forwarded(self, recording):
        fprime = recording(lambda x: 2 * x)

        result = root_scalar(
            f, method="newton", bracket=(0.0, 2.0), x0=1.5, fprime=fprime
        )

        assert result.converged
        assert fprime.num_calls == int(result.num_iterations)

    def test_kwargs_are_forwarded(self):
        result = root_scalar(
            f,
            method="bisection",
            bracket=(0.0, 2.0),
            maxiter=3,
            on_exhaustion="fail",
        )

        assert not result.converged
        assert result.status == RootStatus.EXHAUSTED

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown method"):
            root_scalar(f, method="brent", bracket=(0.0, 2.0))

    def test_missing_bracket(self):
        with pytest.raises(ValueError, match="bracket"):
            root_scalar(f, method="secant", x0=1.5)

    def test_missing_initial_guess(self):
        with pytest.raises(ValueError, match="x0"):
            root_scalar(f, method="newton", bracket=(0.0, 2.0))

    def test_tensor_bracket(self):
        a = torch.zeros(3, dtype=torch.float64)
        b = torch.tensor([2.0, 3.0, 4.0], dtype=torch.float64)

        result = root_scalar(f, bracket=(a, b))

        assert result.root.shape == (3,)
        assert result.converged.all()

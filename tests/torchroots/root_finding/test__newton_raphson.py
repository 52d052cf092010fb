# tests/torchroots/root_finding/test__newton_raphson.py
import math

import pytest
import torch

from torchroots.root_finding import (
    RootFindingWarning,
    RootStatus,
    newton_raphson,
)

# Check if scipy is available for comparison tests
try:
    from scipy.optimize import newton as scipy_newton

    scipy_available = True
except ImportError:
    scipy_available = False


def cubic(x):
    return x**3 - x - 2


def cubic_prime(x):
    return 3 * x**2 - 1


class TestNewtonRaphson:
    """Tests for the Newton-Raphson method."""

    def test_cubic(self):
        """x^3 - x - 2 from 1.5 inside [1, 2]."""
        result = newton_raphson(cubic, cubic_prime, 1.0, 2.0, 1.5)

        assert result.converged
        assert result.status == RootStatus.CONVERGED
        torch.testing.assert_close(
            result.root,
            torch.tensor(1.52137970, dtype=torch.float64),
            rtol=0.0,
            atol=1e-7,
        )

    def test_autograd_derivative(self):
        """g=None computes the derivative with autograd."""
        explicit = newton_raphson(cubic, cubic_prime, 1.0, 2.0, 1.5)
        implicit = newton_raphson(cubic, None, 1.0, 2.0, 1.5)

        assert implicit.converged
        torch.testing.assert_close(implicit.root, explicit.root)
        assert implicit.num_iterations == explicit.num_iterations

    def test_quadratic_convergence(self):
        """Converges in a handful of iterations near a simple root."""
        f = lambda x: x**2 - 2
        df = lambda x: 2 * x

        result = newton_raphson(f, df, 0.0, 3.0, 1.5, maxiter=10)

        assert result.converged
        assert result.num_iterations <= 5
        assert abs(float(result.root) - math.sqrt(2)) < 1e-12

    def test_zero_derivative_fails(self, recording):
        """A vanishing derivative stops the iteration instead of looping."""
        f = lambda x: x**2 + 1
        df = recording(lambda x: 2 * x)

        result = newton_raphson(f, df, -1.0, 1.0, 0.0)

        assert not result.converged
        assert result.status == RootStatus.STALLED
        assert result.num_iterations == 1
        assert df.num_calls == 1
        assert float(result.root) == 0.0

    def test_leaving_interval_fails(self, recording):
        """A step outside [a, b] fails without clamping or fallback."""
        f = recording(lambda x: torch.tanh(x - 2))
        df = lambda x: 1 - torch.tanh(x - 2) ** 2

        # From 0.5 the first step lands near 5.5
        result = newton_raphson(f, df, 0.0, 3.0, 0.5)

        assert not result.converged
        assert result.status == RootStatus.DIVERGED
        assert result.num_iterations == 1
        assert f.num_calls == 1
        assert float(result.root) == 0.5

    def test_step_criterion(self):
        """Convergence is decided by the step size."""
        result = newton_raphson(cubic, cubic_prime, 1.0, 2.0, 1.5)

        # One more Newton step from the root barely moves it
        root = result.root
        step = cubic(root) / cubic_prime(root)
        assert torch.abs(step) < 1e-6

    def test_exhaustion_fails_by_default(self):
        result = newton_raphson(cubic, cubic_prime, 1.0, 2.0, 1.5, maxiter=1)

        assert not result.converged
        assert result.status == RootStatus.EXHAUSTED
        # 1.5 - (-0.125 / 5.75)
        assert abs(float(result.root) - (1.5 + 0.125 / 5.75)) < 1e-12

    def test_exhaustion_best_effort(self):
        with pytest.warns(RootFindingWarning, match="newton_raphson"):
            result = newton_raphson(
                cubic,
                cubic_prime,
                1.0,
                2.0,
                1.5,
                maxiter=1,
                on_exhaustion="best_effort",
            )

        assert result.converged
        assert result.status == RootStatus.EXHAUSTED

    def test_batched(self):
        """Find multiple roots in parallel."""
        c = torch.tensor([2.0, 3.0, 4.0, 5.0], dtype=torch.float64)
        f = lambda x: x**2 - c
        df = lambda x: 2 * x
        x0 = torch.full((4,), 1.5, dtype=torch.float64)

        result = newton_raphson(f, df, 0.0, 10.0, x0)

        assert result.root.shape == (4,)
        assert result.converged.all()
        torch.testing.assert_close(
            result.root, torch.sqrt(c), rtol=0.0, atol=1e-6
        )

    def test_batched_mixed_outcomes(self):
        """Each element stops for its own reason."""
        f = lambda x: x**2 - 2
        df = lambda x: 2 * x
        x0 = torch.tensor([1.5, 0.0, 0.1], dtype=torch.float64)

        result = newton_raphson(f, df, 0.0, 3.0, x0)

        assert result.converged.tolist() == [True, False, False]
        assert result.status.tolist() == [
            RootStatus.CONVERGED,
            RootStatus.STALLED,
            RootStatus.DIVERGED,
        ]

    def test_float32(self):
        """Preserves float32 dtype."""
        x0 = torch.tensor(1.5, dtype=torch.float32)

        result = newton_raphson(cubic, cubic_prime, 1.0, 2.0, x0)

        assert result.root.dtype == torch.float32
        assert result.converged

    @pytest.mark.skipif(not scipy_available, reason="scipy not available")
    def test_matches_scipy(self):
        """Results match scipy.optimize.newton."""
        scipy_root = scipy_newton(
            lambda x: x**3 - x - 2, 1.5, fprime=lambda x: 3 * x**2 - 1
        )

        result = newton_raphson(cubic, cubic_prime, 1.0, 2.0, 1.5)

        assert abs(float(result.root) - scipy_root) < 1e-9

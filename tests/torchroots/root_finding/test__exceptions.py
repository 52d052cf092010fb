# tests/torchroots/root_finding/test__exceptions.py
import pytest

from torchroots.root_finding._exceptions import (
    BracketError,
    ConvergenceError,
    DivergenceError,
    RootFindingError,
    RootFindingWarning,
    StallError,
)


class TestExceptions:
    """Tests for root finding exceptions."""

    def test_root_finding_error_is_exception(self):
        """RootFindingError is a base Exception."""
        assert issubclass(RootFindingError, Exception)

    @pytest.mark.parametrize(
        "error",
        [BracketError, StallError, DivergenceError, ConvergenceError],
    )
    def test_inherits_from_root_finding_error(self, error):
        assert issubclass(error, RootFindingError)

    def test_bracket_error_can_be_raised(self):
        """BracketError can be raised with a message."""
        with pytest.raises(BracketError, match="test message"):
            raise BracketError("test message")

    def test_warning_is_user_warning(self):
        assert issubclass(RootFindingWarning, UserWarning)

    def test_warning_can_be_issued(self):
        import warnings

        with pytest.warns(RootFindingWarning, match="test"):
            warnings.warn("test", RootFindingWarning)

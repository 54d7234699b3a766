"""Property-based tests for enums module."""

from hypothesis import event, given
from hypothesis import strategies as st

from loctable.enums import LoadStatus, PipelinePhase


class TestPipelinePhase:
    """Tests for PipelinePhase."""

    def test_phase_order(self) -> None:
        """Phases are declared in execution order."""
        assert list(PipelinePhase) == [
            PipelinePhase.AGGREGATE,
            PipelinePhase.INDEX,
            PipelinePhase.VALIDATE,
        ]

    @given(st.sampled_from(PipelinePhase))
    def test_str_returns_value(self, phase: PipelinePhase) -> None:
        """Property: str(phase) is its value and round-trips."""
        event(f"phase={phase.value}")
        assert str(phase) == phase.value
        assert PipelinePhase(str(phase)) is phase


class TestLoadStatus:
    """Tests for LoadStatus."""

    def test_members(self) -> None:
        assert {s.value for s in LoadStatus} == {"success", "unsupported", "error"}

    @given(st.sampled_from(LoadStatus))
    def test_str_returns_value(self, status: LoadStatus) -> None:
        """Property: str(status) is its value."""
        event(f"status={status.value}")
        assert str(status) == status.value

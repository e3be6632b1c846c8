"""Tests for processing state models and the completeness rule."""

import pytest
from pydantic import ValidationError

from daily_feed.store.models import ItemStatus, ProcessingState
from tests.helpers.fakes import make_state


DATE = "2024-03-01"


class TestIsComplete:
    """Tests for ProcessingState.is_complete."""

    def test_complete_record(self) -> None:
        """An ok record with all texts and a score is complete."""
        assert make_state(1, DATE).is_complete

    def test_error_status_incomplete(self) -> None:
        """Error records are never complete."""
        assert not make_state(1, DATE, status=ItemStatus.ERROR).is_complete

    @pytest.mark.parametrize("field", ["summary_short", "summary_long", "recommend_reason"])
    def test_empty_text_incomplete(self, field: str) -> None:
        """Each text field must be non-empty."""
        assert not make_state(1, DATE, **{field: ""}).is_complete
        assert not make_state(1, DATE, **{field: None}).is_complete

    def test_missing_score_incomplete(self) -> None:
        """A missing score is incomplete."""
        assert not make_state(1, DATE, score=None).is_complete

    @pytest.mark.parametrize("score", [0, 100])
    def test_boundary_scores_complete(self, score: int) -> None:
        """Scores at the range bounds are valid."""
        assert make_state(1, DATE, score=score).is_complete

    def test_out_of_range_score_incomplete(self) -> None:
        """A score above 100 is incomplete."""
        assert not make_state(1, DATE, score=101).is_complete


class TestProcessingStateValidation:
    """Tests for model constraints."""

    def test_frozen(self) -> None:
        """Records are immutable."""
        state = make_state(1, DATE)
        with pytest.raises(ValidationError):
            state.title = "changed"  # type: ignore[misc]

    def test_unknown_fields_rejected(self) -> None:
        """Extra fields are not allowed."""
        data = make_state(1, DATE).model_dump()
        data["unexpected"] = 1
        with pytest.raises(ValidationError):
            ProcessingState.model_validate(data)

    def test_date_length(self) -> None:
        """Dates must be YYYY-MM-DD sized."""
        with pytest.raises(ValidationError):
            make_state(1, "2024-3-1")

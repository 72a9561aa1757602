"""Tests for edit operation validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from multiedit_mcp.engine.exceptions import InvalidOperationError, ReasonCode
from multiedit_mcp.engine.operations import EditOperation, validate_operations


class TestEditOperation:
    """Tests for the EditOperation model."""

    def test_basic_operation(self) -> None:
        """Test defaults and field access."""
        op = EditOperation(search="foo", replacement="bar")
        assert op.search == "foo"
        assert op.replacement == "bar"
        assert op.replace_all is False

    def test_tool_field_names(self) -> None:
        """Test old_string/new_string aliases."""
        op = EditOperation.model_validate(
            {"old_string": "foo", "new_string": "bar", "replace_all": True}
        )
        assert op.search == "foo"
        assert op.replacement == "bar"
        assert op.replace_all is True

    def test_empty_search_rejected(self) -> None:
        """Test that an empty search cannot be constructed."""
        with pytest.raises(ValidationError, match="search text cannot be empty"):
            EditOperation(search="", replacement="bar")

    def test_noop_rejected(self) -> None:
        """Test that search == replacement cannot be constructed."""
        with pytest.raises(ValidationError, match="must be different"):
            EditOperation(search="same", replacement="same")

    def test_immutable(self) -> None:
        """Test operations are frozen."""
        op = EditOperation(search="foo", replacement="bar")
        with pytest.raises(ValidationError):
            op.search = "baz"  # type: ignore[misc]

    def test_non_string_rejected(self) -> None:
        """Test strict string fields."""
        with pytest.raises(ValidationError):
            EditOperation.model_validate({"search": 1, "replacement": "x"})

    def test_unknown_field_rejected(self) -> None:
        """Test extra keys are not silently ignored."""
        with pytest.raises(ValidationError):
            EditOperation.model_validate({"search": "a", "replacement": "b", "regex": True})


class TestValidateOperations:
    """Tests for validate_operations."""

    def test_valid_list(self) -> None:
        """Test a valid list keeps order."""
        validated = validate_operations(
            [
                {"search": "x", "replacement": "y"},
                {"old_string": "y", "new_string": "z", "replace_all": True},
            ]
        )
        assert [op.search for op in validated.operations] == ["x", "y"]
        assert validated.create_content is None
        assert validated.first_index == 0
        assert validated.total == 2

    def test_empty_list_rejected(self) -> None:
        """Test that at least one edit is required."""
        with pytest.raises(InvalidOperationError, match="At least one edit is required"):
            validate_operations([])

    def test_not_a_list_rejected(self) -> None:
        """Test that a string is not accepted as an edit list."""
        with pytest.raises(InvalidOperationError, match="must be a list"):
            validate_operations("search")  # type: ignore[arg-type]

    def test_noop_reports_index(self) -> None:
        """Test no-op rejection names the failing edit."""
        with pytest.raises(InvalidOperationError) as exc_info:
            validate_operations(
                [
                    {"search": "a", "replacement": "b"},
                    {"search": "c", "replacement": "c"},
                ]
            )
        assert exc_info.value.index == 1
        assert exc_info.value.reason == ReasonCode.INVALID_OPERATION
        assert "must be different" in str(exc_info.value)

    def test_fail_fast_on_first_invalid(self) -> None:
        """Test the first invalid edit is reported even if later ones are invalid too."""
        with pytest.raises(InvalidOperationError) as exc_info:
            validate_operations(
                [
                    {"search": "a", "replacement": "b"},
                    {"search": "", "replacement": "x"},
                    {"search": "c", "replacement": "c"},
                ]
            )
        assert exc_info.value.index == 1
        assert "cannot be empty" in str(exc_info.value)

    def test_non_object_edit(self) -> None:
        """Test edits must be objects."""
        with pytest.raises(InvalidOperationError, match="edit must be an object"):
            validate_operations(["foo"])

    def test_missing_field(self) -> None:
        """Test missing replacement is reported."""
        with pytest.raises(InvalidOperationError) as exc_info:
            validate_operations([{"search": "a"}])
        assert exc_info.value.index == 0

    def test_create_intent(self) -> None:
        """Test empty search on the first edit is the create intent."""
        validated = validate_operations(
            [
                {"search": "", "replacement": "hello world"},
                {"search": "world", "replacement": "there"},
            ]
        )
        assert validated.create_content == "hello world"
        assert validated.first_index == 1
        assert validated.total == 2
        assert len(validated.operations) == 1

    def test_create_intent_requires_content(self) -> None:
        """Test create intent with empty content is rejected."""
        with pytest.raises(InvalidOperationError, match="non-empty replacement"):
            validate_operations([{"search": "", "replacement": ""}])

    @pytest.mark.parametrize(
        "raw",
        [
            {"search": "", "replacement": "content", "unexpected": 1},
            {"search": "", "replacement": "content", "replace_all": "yes"},
            {"old_string": "", "new_string": 42},
            {"search": ""},
        ],
    )
    def test_create_intent_validated_like_other_edits(self, raw: dict) -> None:
        """Test malformed create requests are rejected at index 0."""
        with pytest.raises(InvalidOperationError) as exc_info:
            validate_operations([raw, {"search": "a", "replacement": "b"}])
        assert exc_info.value.index == 0
        assert exc_info.value.reason == ReasonCode.INVALID_OPERATION

    def test_create_intent_accepts_tool_field_names(self) -> None:
        """Test old_string/new_string work for the create intent."""
        validated = validate_operations([{"old_string": "", "new_string": "x"}])
        assert validated.create_content == "x"

    def test_accepts_operation_instances(self) -> None:
        """Test prebuilt operations pass through."""
        op = EditOperation(search="a", replacement="b")
        validated = validate_operations([op])
        assert validated.operations == (op,)

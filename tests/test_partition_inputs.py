"""Tests for shared partition input validation module."""

from validators import InvalidReason, validate_partition_inputs


def sample_matrix() -> dict[str, dict]:
    """Build a small sparse affinity matrix for testing."""
    return {
        "Tokyo": {"Osaka": 3.0},
        "Osaka": {},
        "Kyoto": {"Tokyo": -1.0},
    }


class TestValidInputs:
    """Test cases for inputs that pass validation."""

    def test_valid_inputs_pass(self):
        result = validate_partition_inputs(["Tokyo", "Osaka", "Kyoto"], sample_matrix(), 3)

        assert result.valid
        assert result.reasons == []
        assert result.duplicates == []
        assert result.missing == []

    def test_sparse_rows_are_enough(self):
        """An empty row still counts as present."""
        result = validate_partition_inputs(["Osaka"], sample_matrix(), 1)
        assert result.valid


class TestGroupBudget:
    def test_zero_groups_fails(self):
        result = validate_partition_inputs(["Tokyo"], sample_matrix(), 0)

        assert not result.valid
        assert InvalidReason.MAX_GROUPS_TOO_SMALL in result.reasons
        assert result.max_groups == 0


class TestDuplicates:
    def test_duplicate_names_fail(self):
        result = validate_partition_inputs(
            ["Tokyo", "Osaka", "Tokyo", "Osaka", "Kyoto"], sample_matrix(), 3
        )

        assert not result.valid
        assert result.reasons == [InvalidReason.DUPLICATE_ENTITY]
        assert result.duplicates == ["Osaka", "Tokyo"]


class TestMissingRows:
    def test_missing_rows_fail_in_input_order(self):
        result = validate_partition_inputs(["Nara", "Tokyo", "Kobe", "Nara"], sample_matrix(), 3)

        assert not result.valid
        assert result.missing == ["Nara", "Kobe"]
        assert result.reasons == [
            InvalidReason.DUPLICATE_ENTITY,
            InvalidReason.MISSING_AFFINITY,
        ]

    def test_all_reasons_collected_in_order(self):
        result = validate_partition_inputs(["Nara", "Nara"], sample_matrix(), -1)

        assert result.reasons == [
            InvalidReason.MAX_GROUPS_TOO_SMALL,
            InvalidReason.DUPLICATE_ENTITY,
            InvalidReason.MISSING_AFFINITY,
        ]

"""
Tests for grading metrics against minor/average/major bounds.
"""

import pytest

from hunter_analysis.errors import ThresholdConfigurationError
from hunter_analysis.thresholds import (
    Direction,
    Severity,
    Suggestion,
    ThresholdBounds,
    ThresholdSpec,
    Unit,
    classify,
)


class TestGreaterIsWorse:
    @pytest.mark.parametrize(
        "actual, expected",
        [
            (0, Severity.NONE),
            (1, Severity.NONE),
            (2, Severity.MINOR),
            (3, Severity.AVERAGE),
            (4, Severity.AVERAGE),
            (5, Severity.MAJOR),
            (50, Severity.MAJOR),
        ],
    )
    def test_classify(self, actual, expected):
        assert classify(ThresholdSpec.greater_is_worse(actual, 1, 3, 5)) == expected

    def test_zero_minor_bound(self):
        assert classify(ThresholdSpec.greater_is_worse(0, 0, 2, 4)) == Severity.NONE
        assert classify(ThresholdSpec.greater_is_worse(1, 0, 2, 4)) == Severity.MINOR


class TestLessIsWorse:
    @pytest.mark.parametrize(
        "actual, expected",
        [
            (1.0, Severity.NONE),
            (0.95, Severity.NONE),
            (0.93, Severity.MINOR),
            (0.90, Severity.AVERAGE),
            (0.87, Severity.AVERAGE),
            (0.85, Severity.MAJOR),
            (0.1, Severity.MAJOR),
        ],
    )
    def test_classify(self, actual, expected):
        spec = ThresholdSpec.less_is_worse(actual, 0.95, 0.90, 0.85)

        assert spec.unit == Unit.PERCENTAGE
        assert classify(spec) == expected


class TestThresholdSpec:
    def test_out_of_order_bounds(self):
        with pytest.raises(ThresholdConfigurationError):
            ThresholdSpec.greater_is_worse(1, 5, 3, 1)

        with pytest.raises(ThresholdConfigurationError):
            ThresholdSpec.less_is_worse(1, 0.85, 0.90, 0.95)

    def test_direction_from_string(self):
        spec = ThresholdSpec(2, "greater_is_worse", 1, 3, 5)

        assert spec.direction == Direction.GREATER_IS_WORSE
        assert spec.unit == Unit.COUNT


class TestSuggestion:
    def test_to_dict(self):
        suggestion = Suggestion(
            "serpent_sting_refreshing", ThresholdSpec.greater_is_worse(3, 1, 3, 5)
        )

        assert suggestion.is_triggered
        assert suggestion.to_dict() == {
            "name": "serpent_sting_refreshing",
            "actual": 3,
            "direction": "greater_is_worse",
            "minor": 1,
            "average": 3,
            "major": 5,
            "unit": "count",
            "severity": "average",
        }

    def test_not_triggered(self):
        suggestion = Suggestion("x", ThresholdSpec.greater_is_worse(0, 1, 3, 5))

        assert not suggestion.is_triggered
        assert suggestion.severity == Severity.NONE


class TestThresholdBounds:
    def test_with_actual(self):
        bounds = ThresholdBounds.less_is_worse(0.95, 0.90, 0.85)

        spec = bounds.with_actual(0.90)

        assert spec.unit == Unit.PERCENTAGE
        assert classify(spec) == Severity.AVERAGE

    def test_validate_names_the_threshold(self):
        bounds = ThresholdBounds.greater_is_worse(5, 3, 1)

        with pytest.raises(ThresholdConfigurationError, match="wasted_procs"):
            bounds.validate("wasted_procs")

    def test_declaring_reversed_bounds_does_not_raise(self):
        # Checked when analyzers are wired together, not at class definition
        ThresholdBounds.less_is_worse(0.85, 0.90, 0.95)

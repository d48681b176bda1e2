"""Tests for effective amounts and budget range helpers."""

import pytest

from splitboard.domain.amounts import (
    check_allocation_total,
    clamp_to_allocation_range,
    effective_amount,
    effective_amounts,
    round2,
    validate_allocation_range,
)
from splitboard.domain.category_tree import CategoryTree
from splitboard.domain.entities import BoardSettings, Category
from splitboard.domain.errors import InvalidCategory, InvalidRange


class TestEffectiveAmount:
    """Tests for effective_amount."""

    def test_root_amount(self, simple_tree):
        assert effective_amount(1, {1: 25}, simple_tree, 200) == pytest.approx(50)

    def test_child_amount_multiplies_ancestors(self, simple_tree):
        allocations = {1: 50, 3: 60, 4: 40}

        assert effective_amount(3, allocations, simple_tree, 1000) == pytest.approx(300)
        assert effective_amount(4, allocations, simple_tree, 1000) == pytest.approx(200)

    def test_missing_parent_allocation_is_zero(self, simple_tree):
        # The child owns 100% of a parent that owns nothing
        assert effective_amount(3, {3: 100}, simple_tree, 1000) == 0

    def test_missing_own_allocation_is_zero(self, simple_tree):
        assert effective_amount(4, {1: 100, 3: 100}, simple_tree, 1000) == 0

    def test_partial_then_child_level(self, simple_tree):
        allocations = {1: 100}
        assert effective_amount(1, allocations, simple_tree, 100) == pytest.approx(100)

        allocations.update({3: 60, 4: 40})
        assert effective_amount(3, allocations, simple_tree, 100) == pytest.approx(60)

    def test_unknown_category(self, simple_tree):
        with pytest.raises(InvalidCategory):
            effective_amount(99, {99: 100}, simple_tree, 100)

    def test_cycle_raises_instead_of_looping(self):
        tree = CategoryTree(
            [
                Category(id=1, name="A", parent_id=2),
                Category(id=2, name="B", parent_id=1),
            ]
        )

        with pytest.raises(InvalidCategory):
            effective_amount(1, {1: 50, 2: 50}, tree, 100)

    def test_effective_amounts_covers_every_allocation(self, simple_tree):
        amounts = effective_amounts({1: 50, 2: 50, 3: 100}, simple_tree, 80)

        assert amounts == {1: pytest.approx(40), 2: pytest.approx(40), 3: pytest.approx(40)}


class TestRounding:
    """Tests for round2."""

    @pytest.mark.parametrize(
        "value,expected",
        [(33.333333, 33.33), (66.666666, 66.67), (0.125, 0.13), (2.675, 2.68), (40, 40.0)],
    )
    def test_round_half_up(self, value, expected):
        assert round2(value) == expected


class TestAllocationRange:
    """Tests for board budget range validation and clamping."""

    def test_valid_ranges(self):
        validate_allocation_range(0, 0)
        validate_allocation_range(10, 0)
        validate_allocation_range(10, 100)

    @pytest.mark.parametrize("min_allocation,max_allocation", [(-1, 0), (0, -5), (50, 10)])
    def test_invalid_ranges(self, min_allocation, max_allocation):
        with pytest.raises(InvalidRange):
            validate_allocation_range(min_allocation, max_allocation)

    def test_clamp(self):
        settings = BoardSettings(min_allocation=50, max_allocation=500)

        assert clamp_to_allocation_range(10, settings) == 50
        assert clamp_to_allocation_range(900, settings) == 500
        assert clamp_to_allocation_range(120, settings) == 120

    def test_clamp_unbounded(self):
        assert clamp_to_allocation_range(1e9, BoardSettings()) == 1e9

    def test_check_allocation_total(self):
        settings = BoardSettings(min_allocation=50, max_allocation=500)

        check_allocation_total(50, settings)
        with pytest.raises(InvalidRange, match="at least 50"):
            check_allocation_total(49, settings)
        with pytest.raises(InvalidRange, match="at most 500"):
            check_allocation_total(501, settings)
        with pytest.raises(InvalidRange, match="non-negative"):
            check_allocation_total(-1, BoardSettings())

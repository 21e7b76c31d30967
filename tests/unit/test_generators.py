"""Tests for the input pattern generators."""

import pytest

from algotrace import constants
from algotrace.errors import InputError
from algotrace.generators import generate_values


class TestPatterns:
    @pytest.mark.parametrize("pattern", constants.PATTERNS)
    def test_size_and_range(self, pattern):
        values = generate_values(pattern, size=25, seed=3)
        assert len(values) == 25
        assert all(10 <= v <= 99 for v in values)

    def test_sorted(self):
        values = generate_values("sorted", size=20, seed=1)
        assert values == sorted(values)

    def test_reversed(self):
        values = generate_values("reversed", size=20, seed=1)
        assert values == sorted(values, reverse=True)

    def test_nearly_sorted_is_a_permutation_of_sorted(self):
        values = generate_values("nearly_sorted", size=30, seed=5)
        assert sorted(values) == sorted(generate_values("sorted", size=30, seed=5))

    def test_few_unique_draws_from_fixed_set(self):
        values = generate_values("few_unique", size=50, seed=2)
        assert set(values) <= set(constants.FEW_UNIQUE_VALUES)

    def test_seed_makes_output_reproducible(self):
        assert generate_values(size=15, seed=42) == generate_values(size=15, seed=42)

    @pytest.mark.parametrize("pattern", constants.PATTERNS)
    def test_empty(self, pattern):
        assert generate_values(pattern, size=0, seed=0) == []

    def test_single_nearly_sorted(self):
        assert len(generate_values("nearly_sorted", size=1, seed=0)) == 1


class TestGeneratorErrors:
    def test_unknown_pattern(self):
        with pytest.raises(InputError, match="Unknown pattern"):
            generate_values("zigzag")

    @pytest.mark.parametrize("size", [-1, 2.0, None])
    def test_bad_size(self, size):
        with pytest.raises(InputError):
            generate_values(size=size)

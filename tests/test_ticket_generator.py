from __future__ import annotations

import random

import pytest

from loto_game.errors import AppError
from loto_game.services.ticket_generator import (
    COLUMN_RANGES,
    GenerationExhausted,
    TicketConstraintError,
    TicketGenerator,
    validate_ticket,
)


@pytest.fixture(scope="module")
def sample():
    gen = TicketGenerator(rng=random.Random(20240210))
    return [gen.generate() for _ in range(2000)]


def test_every_generated_ticket_is_valid(sample):
    assert all(validate_ticket(grid) for grid in sample)


def test_shape_and_row_balance(sample):
    for grid in sample:
        assert len(grid) == 3
        assert all(len(row) == 9 for row in grid)
        assert [sum(1 for c in row if c is not None) for row in grid] == [5, 5, 5]


def test_column_counts_between_one_and_three(sample):
    for grid in sample:
        for col in range(9):
            filled = sum(1 for row in grid if row[col] is not None)
            assert 1 <= filled <= 3


def test_fifteen_distinct_numbers(sample):
    for grid in sample:
        nums = [c for row in grid for c in row if c is not None]
        assert len(nums) == 15
        assert len(set(nums)) == 15


def test_columns_ascend_within_range(sample):
    for grid in sample:
        for col, (lo, hi) in enumerate(COLUMN_RANGES):
            column = [row[col] for row in grid if row[col] is not None]
            assert column == sorted(column)
            assert all(lo <= n <= hi for n in column)


def test_boundary_values_are_reachable(sample):
    seen = {c for grid in sample for row in grid for c in row if c is not None}
    for value in (1, 9, 10, 79, 80, 90):
        assert value in seen


def test_outer_columns_stay_in_band(sample):
    for grid in sample:
        assert all(1 <= row[0] <= 9 for row in grid if row[0] is not None)
        assert all(80 <= row[8] <= 90 for row in grid if row[8] is not None)


def test_repeated_calls_differ():
    gen = TicketGenerator()
    grids = {gen.generate() for _ in range(50)}
    assert len(grids) > 1


def test_seeded_generators_agree():
    a = TicketGenerator(rng=random.Random(7)).generate()
    b = TicketGenerator(rng=random.Random(7)).generate()
    assert a == b


def test_generated_grid_is_immutable():
    grid = TicketGenerator(rng=random.Random(1)).generate()
    assert isinstance(grid, tuple)
    assert all(isinstance(row, tuple) for row in grid)


def test_validator_accepts_hand_built_ticket(valid_grid):
    assert validate_ticket(valid_grid) is True


def test_validator_rejects_swapped_column(valid_grid):
    rows = [list(r) for r in valid_grid]
    rows[0][0], rows[2][0] = rows[2][0], rows[0][0]  # 8 above 5
    assert validate_ticket(rows) is False


@pytest.mark.parametrize(
    "mutate",
    [
        lambda rows: rows.pop(),  # two rows
        lambda rows: rows[0].append(None),  # ten cells
        lambda rows: rows[0].__setitem__(1, 15),  # six numbers in row 0
        lambda rows: rows[1].__setitem__(1, 9),  # out of column range
        lambda rows: rows[1].__setitem__(1, True),  # not an int
        lambda rows: rows[1].__setitem__(3, None),  # empty column and row of four
    ],
)
def test_validator_rejects_broken_tickets(valid_grid, mutate):
    rows = [list(r) for r in valid_grid]
    mutate(rows)
    assert validate_ticket(rows) is False


def test_validator_rejects_empty_and_garbage():
    assert validate_ticket(None) is False
    assert validate_ticket("abc") is False
    assert validate_ticket([[None] * 9] * 3) is False


def test_exhaustion_after_exact_budget(monkeypatch, valid_grid):
    gen = TicketGenerator(max_attempts=7, validator=lambda grid: False)
    calls = []

    def _build():
        calls.append(1)
        return valid_grid

    monkeypatch.setattr(gen, "_build", _build)

    with pytest.raises(GenerationExhausted) as excinfo:
        gen.generate()

    assert len(calls) == 7
    assert excinfo.value.details == {"attempts": 7}
    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value, AppError)


def test_success_on_last_attempt_is_not_exhaustion(monkeypatch, valid_grid):
    verdicts = iter([False] * 99 + [True])
    gen = TicketGenerator(validator=lambda grid: next(verdicts))
    monkeypatch.setattr(gen, "_build", lambda: valid_grid)

    assert gen.generate() == valid_grid


def test_constraint_failures_are_retried(monkeypatch, valid_grid):
    outcomes = iter([TicketConstraintError("stuck"), TicketConstraintError("stuck"), valid_grid])

    def _build():
        item = next(outcomes)
        if isinstance(item, Exception):
            raise item
        return item

    gen = TicketGenerator(max_attempts=3)
    monkeypatch.setattr(gen, "_build", _build)

    assert gen.generate() == valid_grid


def test_default_budget_is_one_hundred():
    assert TicketGenerator().max_attempts == 100


def test_invalid_budget():
    with pytest.raises(ValueError):
        TicketGenerator(max_attempts=0)

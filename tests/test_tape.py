import pytest

from streambf.brainfuck import AllocationError, INITIAL_TAPE_SIZE, LeftBoundError, Tape


def test_new_tape_is_zeroed():
    tape = Tape()
    assert len(tape) == INITIAL_TAPE_SIZE
    assert tape.cursor == 0
    assert not tape.cells.any()


def test_increment_wraps_at_255():
    tape = Tape()
    tape.write_cell(255)
    tape.increment()
    assert tape.read_cell() == 0


def test_decrement_wraps_at_zero():
    tape = Tape()
    tape.decrement()
    assert tape.read_cell() == 255


@pytest.mark.parametrize("value", [0, 1, 128, 200, 255])
@pytest.mark.parametrize("n", [1, 255, 256, 1000])
def test_increments_undone_by_decrements(value, n):
    tape = Tape()
    tape.write_cell(value)
    for _ in range(n):
        tape.increment()
    for _ in range(n):
        tape.decrement()
    assert tape.read_cell() == value


def test_move_left_at_start_fails():
    tape = Tape()
    with pytest.raises(LeftBoundError):
        tape.move_left()


def test_move_left_fails_after_returning_to_start():
    tape = Tape()
    for _ in range(5):
        tape.move_right()
    for _ in range(5):
        tape.move_left()
    assert tape.cursor == 0
    with pytest.raises(LeftBoundError):
        tape.move_left()


def test_move_right_doubles_and_keeps_values():
    tape = Tape(4)
    for value in (1, 2, 3):
        tape.write_cell(value)
        tape.move_right()
    assert len(tape) == 4
    tape.write_cell(4)

    tape.move_right()
    assert len(tape) == 8
    assert tape.cursor == 4
    assert list(tape.cells) == [1, 2, 3, 4, 0, 0, 0, 0]


def test_growth_stops_at_limit():
    tape = Tape(4, limit=6)
    for _ in range(5):
        tape.move_right()
    assert len(tape) == 6
    assert tape.cursor == 5
    with pytest.raises(AllocationError):
        tape.move_right()
    assert tape.cursor == 5


def test_write_cell_stores_low_byte():
    tape = Tape()
    tape.write_cell(300)
    assert tape.read_cell() == 44


def test_invalid_sizes_rejected():
    with pytest.raises(ValueError):
        Tape(0)
    with pytest.raises(ValueError):
        Tape(10, limit=5)

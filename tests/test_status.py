import pytest

from minishell.status import exit_status, update_exit_status


@pytest.fixture(autouse=True)
def _reset_status():
    update_exit_status(0)
    yield
    update_exit_status(0)


def test_update_returns_new_status():
    assert update_exit_status(127) == 127


def test_exit_status_reflects_update():
    update_exit_status(2)
    assert exit_status() == 2


def test_last_update_wins():
    for value in (1, 126, 130):
        update_exit_status(value)
    assert exit_status() == 130


def test_reset_to_zero():
    update_exit_status(42)
    update_exit_status(0)
    assert exit_status() == 0


@pytest.mark.parametrize("value", [0, 1, 2, 126, 127, 131, 255])
def test_round_trip(value):
    assert update_exit_status(value) == exit_status() == value
import pytest

from helpers import clear_all_hands, complete_setup, new_game


@pytest.fixture
def fresh_game():
    return new_game()


@pytest.fixture
def main_game():
    """Three players, setup finished, every hand empty, first player to act."""
    game, rng = new_game()
    complete_setup(game)
    clear_all_hands(game)
    return game, rng

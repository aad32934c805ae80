import pytest

from math_devil.entities import Player
from math_devil.physics import integrate


def test_gravity_applies_before_position(config):
    player = Player(x=100.0, y=50.0, vx=0.0, vy=0.0)
    x, y, vy = integrate(player, config)
    assert vy == pytest.approx(config.gravity)
    assert y == pytest.approx(50.0 + config.gravity)
    assert x == 100.0


def test_horizontal_velocity_moves_player(config):
    player = Player(x=100.0, y=50.0, vx=config.move_speed, vy=-3.0)
    x, y, vy = integrate(player, config)
    assert x == pytest.approx(100.0 + config.move_speed)
    assert vy == pytest.approx(-3.0 + config.gravity)
    assert y == pytest.approx(50.0 + vy)


def test_clamped_to_left_edge(config):
    player = Player(x=2.0, y=0.0, vx=-5.0)
    x, _, _ = integrate(player, config)
    assert x == 0.0


def test_clamped_to_right_edge(config):
    right = config.canvas_width - config.player_size
    player = Player(x=right - 1, y=0.0, vx=5.0)
    x, _, _ = integrate(player, config)
    assert x == right


def test_integrate_does_not_mutate_player(config):
    player = Player(x=10.0, y=10.0, vx=1.0, vy=1.0)
    integrate(player, config)
    assert (player.x, player.y, player.vx, player.vy) == (10.0, 10.0, 1.0, 1.0)

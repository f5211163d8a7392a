"""Unit tests for the keyboard/joystick input adapters."""

from __future__ import annotations

import math

import pytest

from outpost.simulation.controls import intent_from_joystick, intent_from_keys


pytestmark = pytest.mark.unit


class TestKeys:
    @pytest.mark.parametrize("keys,expected", [
        ({"w"}, (0.0, -1.0)),
        ({"s"}, (0.0, 1.0)),
        ({"a"}, (-1.0, 0.0)),
        ({"d"}, (1.0, 0.0)),
        ({"ArrowUp"}, (0.0, -1.0)),
        ({"ArrowRight"}, (1.0, 0.0)),
    ])
    def test_single_direction(self, keys, expected):
        assert intent_from_keys(keys) == expected

    def test_diagonal_is_unit_length(self):
        dx, dy = intent_from_keys({"w", "d"})
        assert math.hypot(dx, dy) == pytest.approx(1.0)
        assert dx > 0 and dy < 0

    def test_opposites_cancel(self):
        assert intent_from_keys({"a", "d"}) == (0.0, 0.0)
        assert intent_from_keys({"w", "ArrowDown"}) == (0.0, 0.0)

    def test_nothing_pressed(self):
        assert intent_from_keys([]) == (0.0, 0.0)

    def test_unrelated_keys_ignored(self):
        assert intent_from_keys({"space", "1", "d"}) == (1.0, 0.0)


class TestJoystick:
    def test_direction_normalized(self):
        assert intent_from_joystick(30.0, -40.0) == pytest.approx((0.6, -0.8))

    def test_small_drag_is_full_speed(self):
        dx, dy = intent_from_joystick(0.5, 0.0)
        assert (dx, dy) == (1.0, 0.0)

    def test_centered(self):
        assert intent_from_joystick(0.0, 0.0) == (0.0, 0.0)

import pytest

from app.runtime_utils import (
    clamp_round_seconds,
    clamp_target,
    default_player_name,
    next_turn,
    parse_int,
    pick_winner,
    sanitize_player_name,
    sanitize_room_id,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (7, 7),
        ("12", 12),
        (" 15 secondes", 15),
        ("-4", -4),
        (9.9, 9),
        ("abc", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_clamp_target_bounds_and_default():
    assert clamp_target(None) == 5
    assert clamp_target(0) == 5
    assert clamp_target(-3) == 1
    assert clamp_target(20) == 20
    assert clamp_target(21) == 20
    assert clamp_target(None, 7) == 7
    assert clamp_target(0, 7) == 7


def test_clamp_round_seconds_bounds_and_default():
    assert clamp_round_seconds(None) == 10
    assert clamp_round_seconds(1) == 3
    assert clamp_round_seconds(31) == 30
    assert clamp_round_seconds(12) == 12
    assert clamp_round_seconds(None, 12) == 12
    assert clamp_round_seconds(None, 40) == 30


def test_player_name_sanitizing():
    assert sanitize_player_name("  Alice  ", "Joueur-abcd") == "Alice"
    assert sanitize_player_name("", "Joueur-abcd") == "Joueur-abcd"
    assert sanitize_player_name(None, "Joueur-abcd") == "Joueur-abcd"
    assert sanitize_player_name("y" * 30, "Joueur-abcd") == "y" * 20
    assert default_player_name("f00dbabe-1234") == "Joueur-f00d"


def test_room_id_sanitizing():
    assert sanitize_room_id(None, "salon") == "salon"
    assert sanitize_room_id("  ", "salon") == "salon"
    assert sanitize_room_id(42, "salon") == "42"
    assert sanitize_room_id(0, "salon") == "salon"
    assert sanitize_room_id("r1", "salon") == "r1"


def test_winner_and_turn_helpers():
    assert pick_winner([5, 3]) == 0
    assert pick_winner([3, 5]) == 1
    assert pick_winner([5, 5]) == 1
    assert next_turn(0) == 1
    assert next_turn(1) == 0

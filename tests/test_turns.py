import pytest

from regression_suite import make_match
from toybattle.engine import turns
from toybattle.engine.catalog import CATALOG
from toybattle.engine.dice import rng_for
from toybattle.engine.models import PLAYER1, PLAYER2, Debuff, MatchRoom, RoomError

TEAM = ("Toy Wizard", "Robot Guardian", "Dino", "Brick Dude")


def ready_room(seed=5):
    return MatchRoom(id="r", player1="alice", player2="bob", status="ready", seed=seed, rng=rng_for(seed))


def test_start_match_draws_distinct_rosters_with_positions():
    room = ready_room()
    turns.start_match(room)

    assert room.status == "in_progress"
    assert room.turn_number == 1
    assert room.current_turn in (PLAYER1, PLAYER2)
    for role, z in ((PLAYER1, 2), (PLAYER2, -2)):
        roster = room.roster(role)
        assert len(roster) == 4
        assert len({c.name for c in roster}) == 4
        assert [c.id for c in roster] == [f"{role}-card-{i}" for i in range(4)]
        assert [c.position for c in roster] == [(-3, 0, z), (-1, 0, z), (1, 0, z), (3, 0, z)]
        assert all(c.hp == c.max_hp for c in roster)
    assert room.phase == "awaiting_target"


def test_same_seed_same_match():
    first, second = ready_room(11), ready_room(11)
    turns.start_match(first)
    turns.start_match(second)
    assert first.to_dict() == second.to_dict()


def test_start_requires_ready_room():
    room = ready_room()
    room.status = "waiting"
    with pytest.raises(RoomError):
        turns.start_match(room)


def test_start_with_custom_catalog():
    room = ready_room()
    turns.start_match(room, CATALOG[:4])
    assert {c.name for c in room.player1_cards} == {t.name for t in CATALOG[:4]}


def test_auto_select_picks_a_living_card_and_ready_ability():
    room = make_match(TEAM, TEAM)
    for card in room.player1_cards[:3]:
        card.hp = 0
    brick = room.player1_cards[3]
    brick.abilities[0].current_cooldown = 2
    brick.abilities[2].current_cooldown = 1

    card, index = turns.auto_select(room)

    assert card is brick
    assert index == 1
    assert room.selections[PLAYER1] == (brick.id, 1)


def test_auto_select_falls_back_to_first_ability_when_all_on_cooldown():
    room = make_match(TEAM, TEAM)
    for card in room.player1_cards:
        for ability in card.abilities:
            ability.current_cooldown = 3
    _, index = turns.auto_select(room)
    assert index == 0


def test_selection_event_payload():
    room = make_match(TEAM, TEAM)
    room.selections[PLAYER1] = ("player1-card-0", 1)
    assert turns.selection_event(room, PLAYER1) == {
        "playerRole": PLAYER1,
        "cardId": "player1-card-0",
        "abilityIndex": 1,
        "cardName": "Toy Wizard",
        "abilityName": "Pyroblast",
    }
    assert turns.selection_event(room, PLAYER2) is None


def test_select_target_rejects_wrong_side():
    room = make_match(TEAM, TEAM)
    turns.auto_select(room)
    with pytest.raises(RoomError, match="Not your turn"):
        turns.select_target(room, PLAYER2, room.player1_cards[0].id)


def test_select_target_only_once_per_turn():
    room = make_match(TEAM, TEAM)
    room.selections[PLAYER1] = ("player1-card-0", 1)
    room.phase = "awaiting_target"
    target = room.player2_cards[0].id
    result = turns.select_target(room, PLAYER1, target)
    assert result.outcome.resolved
    assert room.phase == "turn_complete"
    with pytest.raises(RoomError, match="Already acted"):
        turns.select_target(room, PLAYER1, target)


def test_override_selection_uses_client_choice():
    room = make_match(TEAM, TEAM)
    room.selections[PLAYER1] = ("player1-card-0", 0)
    room.phase = "awaiting_target"
    result = turns.select_target(
        room, PLAYER1, room.player2_cards[2].id, selected_card_id="player1-card-3", ability_index=0
    )
    assert result.outcome.ability.name == "Sword Strike"
    assert room.player2_cards[2].hp == 100 - 25


def test_override_ignored_for_defeated_card():
    room = make_match(TEAM, TEAM)
    room.player1_cards[3].hp = 0
    room.selections[PLAYER1] = ("player1-card-0", 1)
    room.phase = "awaiting_target"
    result = turns.select_target(
        room, PLAYER1, room.player2_cards[0].id, selected_card_id="player1-card-3", ability_index=0
    )
    assert result.outcome.ability.name == "Pyroblast"


def test_aborted_cast_keeps_awaiting_target():
    room = make_match(TEAM, TEAM)
    room.selections[PLAYER1] = ("player1-card-0", 1)
    room.phase = "awaiting_target"
    result = turns.select_target(room, PLAYER1, "nobody")
    assert not result.outcome.resolved
    assert room.phase == "awaiting_target"
    assert result.visual_effect is None


def test_resolved_cast_builds_visuals_and_log_entry():
    room = make_match(TEAM, TEAM)
    room.selections[PLAYER1] = ("player1-card-0", 1)
    room.phase = "awaiting_target"
    result = turns.select_target(room, PLAYER1, "player2-card-1")

    assert result.visual_effect["type"] == "fireball"
    assert result.visual_effect["sourcePosition"] == [-3, 0.5, 2]
    assert result.visual_effect["targetPosition"] == [-1, 0.5, -2]
    assert result.combat_log_entry["abilityName"] == "Pyroblast"
    assert result.combat_log_entry["totalDamage"] == 35
    event = result.to_event()
    assert event["casterId"] == "player1-card-0"
    assert event["damages"] == [{"cardId": "player2-card-1", "amount": 35}]


def test_end_turn_flips_and_selects_for_next_side():
    room = make_match(TEAM, TEAM)
    assert turns.end_turn(room, PLAYER1) is False
    assert room.current_turn == PLAYER2
    assert room.turn_number == 2
    assert room.selections[PLAYER1] is None
    assert room.selections[PLAYER2] is not None


def test_end_turn_by_waiting_side_rejected():
    room = make_match(TEAM, TEAM)
    with pytest.raises(RoomError, match="Not your turn"):
        turns.end_turn(room, PLAYER2)
    assert room.current_turn == PLAYER1


def test_last_blow_finishes_the_match():
    room = make_match(TEAM, TEAM)
    for card in room.player2_cards:
        card.hp = 10
    room.selections[PLAYER1] = ("player1-card-0", 2)
    room.phase = "awaiting_target"
    turns.select_target(room, PLAYER1, None)
    assert room.status == "finished"
    assert room.winner == PLAYER1
    with pytest.raises(RoomError, match="not in progress"):
        turns.end_turn(room, PLAYER1)


def test_dot_can_finish_the_match_at_end_of_turn():
    room = make_match(TEAM, TEAM)
    for card in room.player2_cards:
        card.hp = 0
    room.player2_cards[0].hp = 3
    room.player2_cards[0].debuffs.append(Debuff(type="poisoned", duration=4, damage=3))

    assert turns.end_turn(room, PLAYER1) is True

    assert room.status == "finished"
    assert room.winner == PLAYER1


def test_double_knockout_has_no_winner():
    room = make_match(TEAM, TEAM)
    for card in room.player1_cards + room.player2_cards:
        card.hp = 0
    assert turns.check_winner(room)
    assert room.winner is None

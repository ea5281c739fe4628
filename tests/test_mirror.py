import pytest

from toybattle.mirror import ME, OPPONENT, ClientMirror


@pytest.fixture
def mirrors(manager, broadcaster, started):
    """Mirrors for both participants, fed with everything sent so far."""
    alice, bob = ClientMirror("alice"), ClientMirror("bob")
    feed(broadcaster, alice, bob)
    return alice, bob


def feed(broadcaster, *mirrors):
    by_participant = {m.participant: m for m in mirrors}
    for who, event, payload in broadcaster.sent:
        if who in by_participant:
            by_participant[who].handle(event, payload)
    broadcaster.clear()


def test_roles_and_framing(mirrors, started):
    alice, bob = mirrors
    assert (alice.role, bob.role) == ("player1", "player2")
    assert [c["id"] for c in alice.my_cards] == [c.id for c in started.player1_cards]
    assert [c["id"] for c in bob.my_cards] == [c.id for c in started.player2_cards]
    assert alice.opponent_cards == bob.my_cards


def test_exactly_one_side_may_act(mirrors):
    alice, bob = mirrors
    assert alice.is_my_turn != bob.is_my_turn


def test_state_sync_replaces_cards_wholesale(manager, broadcaster, started, mirrors):
    alice, bob = mirrors
    actor = alice if alice.is_my_turn else bob
    started.player2_cards[0].hp = 1
    manager.broadcast_state(started)
    feed(broadcaster, alice, bob)
    assert alice.get_card(OPPONENT, started.player2_cards[0].id)["hp"] == 1
    assert bob.get_card(ME, started.player2_cards[0].id)["hp"] == 1
    assert actor.my_selection["cardId"] is not None


def test_end_turn_hands_the_turn_over(manager, broadcaster, started, mirrors):
    alice, bob = mirrors
    actor, other = (alice, bob) if alice.is_my_turn else (bob, alice)
    manager.dispatch_action(started.id, actor.participant, {"type": "endTurn"})
    feed(broadcaster, alice, bob)
    assert other.is_my_turn and not actor.is_my_turn


def test_combat_log_is_capped(broadcaster, mirrors):
    alice, _ = mirrors
    alice.combat_log_limit = 3
    for i in range(5):
        alice.handle("game:abilityExecuted", {
            "playerRole": "player2",
            "combatLogEntry": {"abilityName": f"Hit {i}", "totalDamage": i},
            "visualEffect": {"type": "fireball"},
        })
    assert [e["abilityName"] for e in alice.combat_log] == ["Hit 2", "Hit 3", "Hit 4"]
    assert alice.combat_log[-1]["side"] == OPPONENT
    assert alice.last_visual_effect == {"type": "fireball"}


def test_game_over_framing(mirrors):
    alice, bob = mirrors
    for mirror in mirrors:
        mirror.handle("game:over", {"winner": "player2"})
    assert (alice.winner, bob.winner) == (OPPONENT, ME)
    assert not alice.is_my_turn and not bob.is_my_turn

    alice.handle("game:over", {"winner": None})
    assert alice.winner == "draw"


def test_errors_are_collected(mirrors):
    alice, _ = mirrors
    alice.handle("error", "Not your turn")
    alice.handle("room:list", [])
    assert alice.errors == ["Not your turn"]


def make_card(card_id, hp=50, debuffs=(), cooldowns=(0, 0), target_types=("single", "all")):
    return {
        "id": card_id,
        "hp": hp,
        "debuffs": [{"type": t} for t in debuffs],
        "abilities": [
            {"name": f"a{i}", "targetType": tt, "currentCooldown": cd}
            for i, (tt, cd) in enumerate(zip(target_types, cooldowns))
        ],
    }


@pytest.fixture
def lone():
    mirror = ClientMirror("alice")
    mirror.handle("room:update", {"player1": "alice", "player2": "bob"})
    mirror.handle("game:stateSync", {
        "player1Cards": [
            make_card("p1-a"),
            make_card("p1-b", hp=0),
            make_card("p1-c", debuffs=("stunned",)),
            make_card("p1-d", cooldowns=(2, 0), target_types=("dead_allies", "all")),
        ],
        "player2Cards": [make_card("p2-a"), make_card("p2-b", hp=0)],
        "currentTurn": "player1",
        "player1SelectedCard": "p1-a",
        "player1SelectedAbility": 0,
    })
    return mirror


def test_can_cast_ability(lone):
    assert lone.can_cast_ability("p1-a", 0)
    assert not lone.can_cast_ability("p1-b", 0)
    assert not lone.can_cast_ability("p1-c", 0)
    assert not lone.can_cast_ability("p1-d", 0)
    assert lone.can_cast_ability("p1-d", 1)
    assert not lone.can_cast_ability("p1-a", 5)
    assert not lone.can_cast_ability("p2-a", 0)


def test_valid_targets_for_single(lone):
    assert lone.waiting_for_target
    assert lone.valid_targets() == ["p1-a", "p1-c", "p1-d", "p2-a"]


def test_valid_targets_for_dead_allies(lone):
    lone.selections[ME] = {"cardId": "p1-d", "abilityIndex": 0}
    assert lone.valid_targets() == ["p1-b"]


def test_no_targets_for_area_abilities(lone):
    lone.selections[ME] = {"cardId": "p1-a", "abilityIndex": 1}
    assert not lone.waiting_for_target
    assert lone.valid_targets() == []


def test_no_targets_off_turn(lone):
    lone.current_turn = "player2"
    assert lone.valid_targets() == []

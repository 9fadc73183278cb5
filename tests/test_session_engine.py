from collections import Counter

import pytest

from conftest import make_players
from undercover.models.actions import (
    ACTION_ADAPTER,
    DisableCurrentPairAndRestart,
    EliminatePlayer,
    GoHome,
    NextReveal,
    SetPhase,
    StartGame,
    ToggleCategory,
    UpdateIntrusConfig,
)
from undercover.models.game import AntiCheatSettings, GameConfig, IntrusConfig, SessionState
from undercover.services import session_engine as engine
from undercover.services.session_engine import SessionError, check_game_over

NAMES = ["Alice", "Bob", "Charlie"]
ICONS = ["🐶", "🐱", "🐸"]
COLORS = ["#E17055", "#00B894", "#6C5CE7"]


def started(catalog, rng, state=None, names=NAMES, icons=ICONS, colors=COLORS):
    return engine.start_game(state or SessionState(), names, icons, colors, catalog, rng).state


def discussion_state(roles, **config):
    return SessionState(phase="discussion", players=make_players(roles), config=GameConfig(**config))


# ---------------- check_game_over ----------------

def test_check_game_over_continues_while_both_sides_alive():
    assert check_game_over(make_players(["civil", "civil", "undercover"])) is None


def test_check_game_over_civil_when_no_intrus_left():
    assert check_game_over(make_players(["civil", "civil", "undercover"], eliminated={2})) == "civil"


def test_check_game_over_intrus_when_no_civil_left():
    assert check_game_over(make_players(["civil", "mrwhite", "undercover"], eliminated={0})) == "intrus"


# ---------------- start / reveal ----------------

def test_start_game_enters_reveal(catalog, rng):
    transition = engine.start_game(SessionState(), NAMES, ICONS, COLORS, catalog, rng)
    state = transition.state

    assert state.phase == "reveal"
    assert state.current_player_index == 0
    assert len(state.players) == 3
    assert [p.name for p in state.players] == NAMES
    assert state.current_pair is not None
    assert sorted(state.speaking_order) == [0, 1, 2]
    assert state.winner is None
    assert Counter(p.role for p in state.players) == Counter({"civil": 2, "undercover": 1})

    [command] = transition.commands
    assert command.key == "player_profiles"
    assert [p["name"] for p in command.value] == NAMES


def test_start_game_uses_selected_categories_and_disabled_pairs(catalog, rng):
    food = [p.id for p in catalog.by_category("food")]
    state = SessionState(config=GameConfig(selected_categories=["food"]), disabled_pair_ids=food[1:])
    for _ in range(10):
        assert started(catalog, rng, state).current_pair.id == food[0]


def test_start_game_requires_minimum_players(catalog, rng):
    with pytest.raises(SessionError):
        engine.start_game(SessionState(), NAMES[:2], ICONS[:2], COLORS[:2], catalog, rng)


def test_start_game_resets_previous_round(catalog, rng):
    state = started(catalog, rng).model_copy(update={"winner": "civil", "phase": "result"})
    again = started(catalog, rng, state)
    assert again.winner is None
    assert again.phase == "reveal"
    assert again.cheat_log.show_all_count == 0


def test_three_reveals_reach_discussion(catalog, rng):
    state = started(catalog, rng)
    state = engine.next_reveal(state).state
    assert (state.phase, state.current_player_index) == ("reveal", 1)
    state = engine.next_reveal(state).state
    assert (state.phase, state.current_player_index) == ("reveal", 2)
    state = engine.next_reveal(state).state
    assert (state.phase, state.current_player_index) == ("discussion", 0)


def test_next_reveal_outside_reveal_is_refused():
    with pytest.raises(SessionError):
        engine.next_reveal(SessionState())


def test_random_split_resolved_at_start(catalog, rng):
    config = GameConfig(intrus=IntrusConfig(intrus_count=3, mr_white_enabled=True, random_split=True))
    names = [f"P{i}" for i in range(8)]
    for _ in range(20):
        state = started(catalog, rng, SessionState(config=config), names, names, names)
        counts = Counter(p.role for p in state.players)
        assert counts["undercover"] + counts["mrwhite"] == 3


# ---------------- restart ----------------

def test_restart_keeps_identities_and_rerolls(catalog, rng):
    state = started(catalog, rng)
    state = engine.next_reveal(state).state
    old_ids = {p.id for p in state.players}

    restarted = engine.restart_with_same_players(state, catalog, rng).state
    assert restarted.phase == "reveal"
    assert restarted.current_player_index == 0
    assert [(p.name, p.icon, p.color) for p in restarted.players] == list(zip(NAMES, ICONS, COLORS))
    assert not old_ids & {p.id for p in restarted.players}


def test_restart_without_players_is_refused(catalog, rng):
    with pytest.raises(SessionError):
        engine.restart_with_same_players(SessionState(), catalog, rng)


def test_disable_current_pair_and_restart(catalog, rng):
    state = started(catalog, rng)
    pair_id = state.current_pair.id

    transition = engine.disable_current_pair_and_restart(state, catalog=catalog, rng=rng)
    assert transition.state.disabled_pair_ids == [pair_id]
    assert transition.state.current_pair.id != pair_id
    assert transition.commands[0].key == "disabled_pairs"
    assert transition.commands[0].value == [pair_id]


def test_disable_current_pair_is_idempotent(catalog, rng):
    state = started(catalog, rng)
    state = state.model_copy(update={"disabled_pair_ids": [state.current_pair.id]})
    transition = engine.disable_current_pair_and_restart(state, catalog=catalog, rng=rng)
    assert transition.state.disabled_pair_ids.count(state.current_pair.id) == 1


def test_disable_current_pair_rotates_requesting_player_first(catalog, rng):
    state = started(catalog, rng)
    restarted = engine.disable_current_pair_and_restart(state, 2, catalog, rng).state
    assert [p.name for p in restarted.players] == ["Charlie", "Alice", "Bob"]


def test_disable_without_pair_is_refused(catalog, rng):
    with pytest.raises(SessionError):
        engine.disable_current_pair_and_restart(SessionState(), catalog=catalog, rng=rng)


# ---------------- elimination ----------------

def test_elimination_scenario_civils_win():
    state = discussion_state(["civil", "civil", "civil", "undercover", "mrwhite"])
    before = state.players

    state = engine.eliminate_player(state, 3).state
    assert state.winner is None
    assert state.phase == "discussion"
    assert before[3].eliminated is False  # la liste précédente reste intacte

    state = engine.eliminate_player(state, 4).state
    assert state.winner == "civil"
    assert state.phase == "result"


def test_elimination_intrus_win():
    state = discussion_state(["civil", "civil", "undercover", "undercover"])
    state = engine.eliminate_player(state, 0).state
    state = engine.eliminate_player(state, 1).state
    assert (state.winner, state.phase) == ("intrus", "result")


def test_eliminating_twice_changes_nothing():
    state = engine.eliminate_player(discussion_state(["civil", "civil", "civil", "undercover"]), 0).state
    assert engine.eliminate_player(state, 0).state is state


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_elimination_rejects_bad_index(index):
    with pytest.raises(SessionError):
        engine.eliminate_player(discussion_state(["civil", "civil", "undercover"]), index)


def test_elimination_outside_discussion_is_refused():
    state = discussion_state(["civil", "civil", "undercover"]).model_copy(update={"phase": "reveal"})
    with pytest.raises(SessionError):
        engine.eliminate_player(state, 0)


# ---------------- anti-triche ----------------

def test_record_peek_counts_per_player():
    state = discussion_state(["civil", "civil", "undercover"])
    state = engine.record_peek(state, 1).state
    state = engine.record_peek(state, 1).state
    assert state.cheat_log.peek_counts == {1: 2}
    assert state.cheat_log.anyone_peeked


def test_record_peek_refused_when_disabled():
    state = discussion_state(["civil", "civil", "undercover"], anti_cheat=AntiCheatSettings(allow_peek=False))
    with pytest.raises(SessionError):
        engine.record_peek(state, 0)


def test_record_show_all():
    state = engine.record_show_all(discussion_state(["civil", "civil", "undercover"])).state
    assert state.cheat_log.show_all_count == 1


# ---------------- go home / config ----------------

def test_go_home_clears_round_keeps_config(catalog, rng):
    config = GameConfig(easy_mode=True, selected_categories=["food"], mr_white_cannot_start=False)
    state = started(catalog, rng, SessionState(config=config, disabled_pair_ids=["p0"]))

    home = engine.go_home(state).state
    assert home.phase == "home"
    assert home.players == []
    assert home.current_pair is None
    assert home.speaking_order == []
    assert home.current_player_index == 0
    assert home.winner is None
    assert home.config == config
    assert home.disabled_pair_ids == ["p0"]


def test_set_phase_only_navigates_setup_and_home():
    assert engine.set_phase(SessionState(), "setup").state.phase == "setup"
    with pytest.raises(SessionError):
        engine.set_phase(SessionState(), "discussion")


def test_update_intrus_config_clamps_and_persists():
    transition = engine.update_intrus_config(SessionState(), 4, intrus_count=5, undercover_count=5)
    assert transition.state.config.intrus.intrus_count == 2
    assert transition.state.config.intrus.undercover_count == 2
    assert transition.commands[0].key == "intrus_config"
    assert transition.commands[0].value["intrus_count"] == 2


def test_toggle_category_and_select_category():
    state = engine.toggle_category(SessionState(), "animals").state
    state = engine.toggle_category(state, "food").state
    assert state.config.selected_categories == ["animals", "food"]
    state = engine.toggle_category(state, "animals").state
    assert state.config.selected_categories == ["food"]
    assert engine.set_selected_category(state, None).state.config.selected_categories == []


def test_toggle_pair():
    state = engine.toggle_pair(SessionState(), "p1").state
    assert state.disabled_pair_ids == ["p1"]
    assert engine.toggle_pair(state, "p1").state.disabled_pair_ids == []


# ---------------- reduce ----------------

def test_reduce_runs_a_full_round(catalog, rng):
    state = SessionState()
    state = engine.reduce(state, SetPhase(phase="setup")).state
    state = engine.reduce(state, UpdateIntrusConfig(player_count=3, intrus_count=1)).state
    state = engine.reduce(state, StartGame(names=NAMES, icons=ICONS, colors=COLORS), catalog, rng).state
    for _ in NAMES:
        state = engine.reduce(state, NextReveal()).state
    assert state.phase == "discussion"

    intrus = next(i for i, p in enumerate(state.players) if p.role != "civil")
    state = engine.reduce(state, EliminatePlayer(index=intrus)).state
    assert (state.phase, state.winner) == ("result", "civil")

    state = engine.reduce(state, DisableCurrentPairAndRestart(first_player_index=1), catalog, rng).state
    assert state.phase == "reveal"
    assert engine.reduce(state, GoHome()).state.phase == "home"


def test_actions_parse_from_dicts():
    action = ACTION_ADAPTER.validate_python({"type": "toggle_category", "category": "music"})
    assert action == ToggleCategory(category="music")
    assert engine.reduce(SessionState(), action).state.config.selected_categories == ["music"]


# ---------------- config saved for another table ----------------

def test_stale_intrus_config_is_reclamped_at_start(catalog, rng):
    # réglage enregistré pour 8 joueurs, partie lancée à 4
    config = GameConfig(intrus=IntrusConfig(intrus_count=5, mr_white_enabled=True, random_split=True))
    names = ["Alice", "Bob", "Charlie", "Dana"]
    splits = Counter()
    for _ in range(300):
        state = started(catalog, rng, SessionState(config=config), names, names, names)
        roles = Counter(p.role for p in state.players)
        splits[(roles["undercover"], roles["mrwhite"])] += 1

    assert set(splits) == {(2, 0), (1, 1), (0, 2)}
    for count in splits.values():
        assert 60 <= count <= 140


def test_restart_reclamps_intrus_config(catalog, rng):
    config = GameConfig(intrus=IntrusConfig(intrus_count=6, undercover_count=6))
    state = started(catalog, rng, SessionState(config=config))
    restarted = engine.restart_with_same_players(state, catalog, rng).state
    for dealt in (state, restarted):
        assert Counter(p.role for p in dealt.players) == Counter({"civil": 2, "undercover": 1})


def test_setters_validate_values():
    with pytest.raises(SessionError):
        engine.set_display_mode(SessionState(), "hologram")
    assert engine.set_display_mode(SessionState(), "icon").state.config.display_mode == "icon"


def test_update_intrus_config_coerces_and_rejects_bad_values():
    state = engine.update_intrus_config(SessionState(), 6, intrus_count="2").state
    assert state.config.intrus.intrus_count == 2
    with pytest.raises(SessionError):
        engine.update_intrus_config(SessionState(), 6, intrus_count="many")

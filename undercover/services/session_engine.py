"""
Service: session_engine.py
Rôle:
- Réducteurs purs de la session : `(état, action) → Transition(nouvel état, écritures)`.
- Vérification de fin de partie après chaque élimination.

Phases:
- HOME → SETUP → REVEAL → DISCUSSION → RESULT ; retour à HOME possible depuis toutes.
- REVEAL → DISCUSSION : automatique quand le curseur de révélation dépasse le dernier joueur.
- DISCUSSION → RESULT : uniquement via une élimination qui désigne un vainqueur.
- RESULT : terminal pour la manche (seuls "rejouer" et "accueil" en sortent).

Notes:
- Aucun I/O ici : les sauvegardes sont rendues sous forme de `PersistCommand`
  que l'appelant (voir `session_store.GameStore`) exécute.
- Copy-on-write : on reconstruit les listes, on ne modifie jamais un joueur en place.
- Le hasard (paire, répartition, rôles, ordre) passe par `rng`, injectable en test.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from undercover.config.settings import settings
from undercover.models import actions as A
from undercover.models.game import (
    AntiCheatSettings,
    CheatLog,
    GameConfig,
    IntrusConfig,
    PersistCommand,
    SessionState,
    Transition,
    Winner,
)
from undercover.models.player import CIVIL, Player, PlayerProfile
from .catalog import PairCatalog
from .pair_selector import pick_pair
from .player_builder import create_players
from .preferences import (
    PREF_ANTI_CHEAT,
    PREF_DISABLED_PAIRS,
    PREF_DISPLAY_MODE,
    PREF_EASY_MODE,
    PREF_INTRUS_CONFIG,
    PREF_MR_WHITE_CANNOT_START,
    PREF_PLAYER_PROFILES,
    PREF_SELECTED_CATEGORIES,
)
from .roles_engine import clamp_intrus_counts, compute_final_counts
from .speaking_order import build_speaking_order

logger = logging.getLogger(__name__)

PHASE_HOME = "home"
PHASE_SETUP = "setup"
PHASE_REVEAL = "reveal"
PHASE_DISCUSSION = "discussion"
PHASE_RESULT = "result"


class SessionError(ValueError):
    """Transition impossible depuis l'état courant (mauvaise phase, index invalide…)."""


# -------------------- utilitaires --------------------

def check_game_over(players: Sequence[Player]) -> Optional[Winner]:
    """
    "civil" si plus aucun intrus en vie, "intrus" si plus aucun civil, sinon None.
    """
    alive = [p for p in players if not p.eliminated]
    alive_intrus = any(p.is_intrus for p in alive)
    alive_civils = any(p.role == CIVIL for p in alive)
    if not alive_intrus:
        return "civil"
    if not alive_civils:
        return "intrus"
    return None


def _require_phase(state: SessionState, *phases: str) -> None:
    if state.phase not in phases:
        raise SessionError(f"Action not allowed in phase {state.phase!r} (expected {', '.join(phases)})")


def _require_index(state: SessionState, index: int) -> None:
    if not 0 <= index < len(state.players):
        raise SessionError(f"Unknown player index {index}")


def _with_config(state: SessionState, **changes: Any) -> SessionState:
    # model_copy ne valide pas : on reconstruit la config
    try:
        config = GameConfig.model_validate({**state.config.model_dump(), **changes})
    except ValidationError as exc:
        raise SessionError(f"Invalid settings: {exc}") from exc
    return state.model_copy(update={"config": config})


def _profiles_command(names: Sequence[str], icons: Sequence[str], colors: Sequence[str]) -> PersistCommand:
    profiles = [PlayerProfile(name=n, icon=i, color=c).model_dump() for n, i, c in zip(names, icons, colors)]
    return PersistCommand(key=PREF_PLAYER_PROFILES, value=profiles)


def _deal(
    state: SessionState,
    names: Sequence[str],
    icons: Sequence[str],
    colors: Sequence[str],
    catalog: Optional[PairCatalog],
    rng: Optional[Any],
) -> SessionState:
    """Distribue une manche complète : répartition, paire, joueurs, ordre de parole."""
    count = len(names)
    if count < settings.MIN_PLAYERS or count > settings.MAX_PLAYERS:
        raise SessionError(f"A game needs {settings.MIN_PLAYERS} to {settings.MAX_PLAYERS} players, got {count}")

    intrus = clamp_intrus_counts(count, state.config.intrus)
    undercover_count, mr_white_count = compute_final_counts(intrus, rng)
    pair = pick_pair(state.config.selected_categories, state.disabled_pair_ids, catalog, rng)
    players = create_players(names, icons, colors, pair, undercover_count, mr_white_count, rng)
    order = build_speaking_order(players, state.config.mr_white_cannot_start, rng)

    logger.info(
        "Round dealt",
        extra={"players": count, "pair_id": pair.id, "undercover": undercover_count, "mr_white": mr_white_count},
    )
    return state.model_copy(update={
        "phase": PHASE_REVEAL,
        "players": players,
        "current_pair": pair,
        "current_player_index": 0,
        "speaking_order": order,
        "winner": None,
        "cheat_log": CheatLog(),
    })


# -------------------- partie --------------------

def start_game(
    state: SessionState,
    names: Sequence[str],
    icons: Sequence[str],
    colors: Sequence[str],
    catalog: Optional[PairCatalog] = None,
    rng: Optional[Any] = None,
) -> Transition:
    new_state = _deal(state, names, icons, colors, catalog, rng)
    return Transition(state=new_state, commands=[_profiles_command(names, icons, colors)])


def next_reveal(state: SessionState) -> Transition:
    _require_phase(state, PHASE_REVEAL)
    cursor = state.current_player_index + 1
    if cursor >= len(state.players):
        logger.info("All cards revealed, discussion starts")
        return Transition(state=state.model_copy(update={"phase": PHASE_DISCUSSION, "current_player_index": 0}))
    return Transition(state=state.model_copy(update={"current_player_index": cursor}))


def restart_with_same_players(
    state: SessionState,
    catalog: Optional[PairCatalog] = None,
    rng: Optional[Any] = None,
    first_player_index: Optional[int] = None,
) -> Transition:
    """Nouvelle manche avec les mêmes identités : rôles et paire entièrement re-tirés."""
    if not state.players:
        raise SessionError("No players to restart with")
    players: List[Player] = list(state.players)
    if first_player_index is not None:
        _require_index(state, first_player_index)
        players = players[first_player_index:] + players[:first_player_index]

    names = [p.name for p in players]
    icons = [p.icon for p in players]
    colors = [p.color for p in players]
    new_state = _deal(state, names, icons, colors, catalog, rng)
    return Transition(state=new_state, commands=[_profiles_command(names, icons, colors)])


def disable_current_pair_and_restart(
    state: SessionState,
    first_player_index: Optional[int] = None,
    catalog: Optional[PairCatalog] = None,
    rng: Optional[Any] = None,
) -> Transition:
    """
    Exclut la paire en cours puis relance.

    `first_player_index` : le joueur qui a demandé le changement passe en tête de la
    révélation (il vient de voir sa carte, inutile de lui faire attendre tout le tour).
    """
    if state.current_pair is None:
        raise SessionError("No current pair to disable")
    disabled = list(state.disabled_pair_ids)
    if state.current_pair.id not in disabled:
        disabled.append(state.current_pair.id)
    logger.info("Pair disabled", extra={"pair_id": state.current_pair.id})

    base = state.model_copy(update={"disabled_pair_ids": disabled})
    restarted = restart_with_same_players(base, catalog, rng, first_player_index)
    commands = [PersistCommand(key=PREF_DISABLED_PAIRS, value=disabled), *restarted.commands]
    return Transition(state=restarted.state, commands=commands)


def eliminate_player(state: SessionState, index: int) -> Transition:
    _require_phase(state, PHASE_DISCUSSION)
    _require_index(state, index)
    if state.players[index].eliminated:
        return Transition(state=state)

    players = [
        p.model_copy(update={"eliminated": True}) if i == index else p
        for i, p in enumerate(state.players)
    ]
    winner = check_game_over(players)
    update: Dict[str, Any] = {"players": players, "winner": winner}
    if winner is not None:
        update["phase"] = PHASE_RESULT
        logger.info("Game over", extra={"winner": winner})
    return Transition(state=state.model_copy(update=update))


def record_peek(state: SessionState, index: int) -> Transition:
    _require_phase(state, PHASE_DISCUSSION)
    _require_index(state, index)
    if not state.config.anti_cheat.allow_peek:
        raise SessionError("Peeking is disabled")
    counts = dict(state.cheat_log.peek_counts)
    counts[index] = counts.get(index, 0) + 1
    cheat_log = state.cheat_log.model_copy(update={"peek_counts": counts})
    return Transition(state=state.model_copy(update={"cheat_log": cheat_log}))


def record_show_all(state: SessionState) -> Transition:
    _require_phase(state, PHASE_DISCUSSION)
    if not state.config.anti_cheat.allow_show_all:
        raise SessionError("Showing all cards is disabled")
    cheat_log = state.cheat_log.model_copy(update={"show_all_count": state.cheat_log.show_all_count + 1})
    return Transition(state=state.model_copy(update={"cheat_log": cheat_log}))


def go_home(state: SessionState) -> Transition:
    """Abandon : vide la manche, conserve config et paires désactivées."""
    return Transition(state=SessionState(config=state.config, disabled_pair_ids=list(state.disabled_pair_ids)))


# -------------------- configuration --------------------

def set_phase(state: SessionState, phase: str) -> Transition:
    if phase == PHASE_HOME:
        return go_home(state)
    if phase != PHASE_SETUP:
        raise SessionError(f"Phase {phase!r} is only reachable through game actions")
    return Transition(state=state.model_copy(update={"phase": PHASE_SETUP}))


def update_intrus_config(state: SessionState, player_count: int, **changes: Any) -> Transition:
    """Applique les changements non nuls puis re-borne pour `player_count` joueurs."""
    edits = {k: v for k, v in changes.items() if v is not None}
    try:
        edited = IntrusConfig.model_validate({**state.config.intrus.model_dump(), **edits})
    except ValidationError as exc:
        raise SessionError(f"Invalid intrus settings: {exc}") from exc
    intrus = clamp_intrus_counts(player_count, edited)
    new_state = _with_config(state, intrus=intrus)
    return Transition(state=new_state, commands=[PersistCommand(key=PREF_INTRUS_CONFIG, value=intrus.model_dump())])


def set_easy_mode(state: SessionState, enabled: bool) -> Transition:
    return Transition(
        state=_with_config(state, easy_mode=enabled),
        commands=[PersistCommand(key=PREF_EASY_MODE, value=enabled)],
    )


def set_mr_white_cannot_start(state: SessionState, enabled: bool) -> Transition:
    return Transition(
        state=_with_config(state, mr_white_cannot_start=enabled),
        commands=[PersistCommand(key=PREF_MR_WHITE_CANNOT_START, value=enabled)],
    )


def _set_categories(state: SessionState, categories: List[str]) -> Transition:
    return Transition(
        state=_with_config(state, selected_categories=categories),
        commands=[PersistCommand(key=PREF_SELECTED_CATEGORIES, value=categories)],
    )


def set_selected_category(state: SessionState, category: Optional[str]) -> Transition:
    return _set_categories(state, [] if category is None else [category])


def toggle_category(state: SessionState, category: str) -> Transition:
    current = state.config.selected_categories
    if category in current:
        return _set_categories(state, [c for c in current if c != category])
    return _set_categories(state, [*current, category])


def set_anti_cheat(state: SessionState, anti_cheat: AntiCheatSettings) -> Transition:
    return Transition(
        state=_with_config(state, anti_cheat=anti_cheat),
        commands=[PersistCommand(key=PREF_ANTI_CHEAT, value=anti_cheat.model_dump())],
    )


def set_display_mode(state: SessionState, mode: str) -> Transition:
    return Transition(
        state=_with_config(state, display_mode=mode),
        commands=[PersistCommand(key=PREF_DISPLAY_MODE, value=mode)],
    )


def set_disabled_pairs(state: SessionState, pair_ids: Sequence[str]) -> Transition:
    disabled = list(dict.fromkeys(pair_ids))
    return Transition(
        state=state.model_copy(update={"disabled_pair_ids": disabled}),
        commands=[PersistCommand(key=PREF_DISABLED_PAIRS, value=disabled)],
    )


def toggle_pair(state: SessionState, pair_id: str) -> Transition:
    current = state.disabled_pair_ids
    if pair_id in current:
        return set_disabled_pairs(state, [p for p in current if p != pair_id])
    return set_disabled_pairs(state, [*current, pair_id])


# -------------------- dispatch --------------------

Handler = Callable[[SessionState, Any, Optional[PairCatalog], Optional[Any]], Transition]

_HANDLERS: Dict[str, Handler] = {
    "set_phase": lambda s, a, c, r: set_phase(s, a.phase),
    "update_intrus_config": lambda s, a, c, r: update_intrus_config(
        s, a.player_count, **a.model_dump(exclude={"type", "player_count"})
    ),
    "set_easy_mode": lambda s, a, c, r: set_easy_mode(s, a.enabled),
    "set_mr_white_cannot_start": lambda s, a, c, r: set_mr_white_cannot_start(s, a.enabled),
    "set_selected_category": lambda s, a, c, r: set_selected_category(s, a.category),
    "toggle_category": lambda s, a, c, r: toggle_category(s, a.category),
    "set_anti_cheat": lambda s, a, c, r: set_anti_cheat(s, a.settings),
    "set_display_mode": lambda s, a, c, r: set_display_mode(s, a.mode),
    "set_disabled_pairs": lambda s, a, c, r: set_disabled_pairs(s, a.pair_ids),
    "toggle_pair": lambda s, a, c, r: toggle_pair(s, a.pair_id),
    "start_game": lambda s, a, c, r: start_game(s, a.names, a.icons, a.colors, c, r),
    "next_reveal": lambda s, a, c, r: next_reveal(s),
    "restart_with_same_players": lambda s, a, c, r: restart_with_same_players(s, c, r),
    "disable_current_pair_and_restart": lambda s, a, c, r: disable_current_pair_and_restart(
        s, a.first_player_index, c, r
    ),
    "eliminate_player": lambda s, a, c, r: eliminate_player(s, a.index),
    "record_peek": lambda s, a, c, r: record_peek(s, a.index),
    "record_show_all": lambda s, a, c, r: record_show_all(s),
    "go_home": lambda s, a, c, r: go_home(s),
}


def reduce(
    state: SessionState,
    action: A.Action,
    catalog: Optional[PairCatalog] = None,
    rng: Optional[Any] = None,
) -> Transition:
    """Point d'entrée unique : route une action vers son réducteur."""
    handler = _HANDLERS.get(action.type)
    if handler is None:
        raise SessionError(f"Unknown action {action.type!r}")
    logger.debug("Reducing action", extra={"action": action.type, "phase": state.phase})
    return handler(state, action, catalog, rng)

"""
Models / actions.py
Rôle:
- Définir les actions acceptées par le réducteur de session (`session_engine.reduce`).

Notes:
- `type` sert de discriminant : `ACTION_ADAPTER.validate_python({"type": "next_reveal"})`
  reconstruit l'action depuis un dict (pratique pour rejouer un journal ou piloter en CLI).
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .game import AntiCheatSettings, DisplayMode, Phase


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- navigation / setup ---

class SetPhase(_Action):
    type: Literal["set_phase"] = "set_phase"
    phase: Phase


class UpdateIntrusConfig(_Action):
    """Modifie le réglage des intrus puis le re-borne pour `player_count` joueurs."""
    type: Literal["update_intrus_config"] = "update_intrus_config"
    player_count: int
    intrus_count: Optional[int] = None
    undercover_enabled: Optional[bool] = None
    mr_white_enabled: Optional[bool] = None
    random_split: Optional[bool] = None
    undercover_count: Optional[int] = None
    mr_white_count: Optional[int] = None


class SetEasyMode(_Action):
    type: Literal["set_easy_mode"] = "set_easy_mode"
    enabled: bool


class SetMrWhiteCannotStart(_Action):
    type: Literal["set_mr_white_cannot_start"] = "set_mr_white_cannot_start"
    enabled: bool


class SetSelectedCategory(_Action):
    """Sélection exclusive d'une catégorie (None = toutes)."""
    type: Literal["set_selected_category"] = "set_selected_category"
    category: Optional[str] = None


class ToggleCategory(_Action):
    type: Literal["toggle_category"] = "toggle_category"
    category: str


class SetAntiCheat(_Action):
    type: Literal["set_anti_cheat"] = "set_anti_cheat"
    settings: AntiCheatSettings


class SetDisplayMode(_Action):
    type: Literal["set_display_mode"] = "set_display_mode"
    mode: DisplayMode


class SetDisabledPairs(_Action):
    type: Literal["set_disabled_pairs"] = "set_disabled_pairs"
    pair_ids: List[str] = Field(default_factory=list)


class TogglePair(_Action):
    type: Literal["toggle_pair"] = "toggle_pair"
    pair_id: str


# --- partie ---

class StartGame(_Action):
    type: Literal["start_game"] = "start_game"
    names: List[str]
    icons: List[str]
    colors: List[str]


class NextReveal(_Action):
    type: Literal["next_reveal"] = "next_reveal"


class RestartWithSamePlayers(_Action):
    type: Literal["restart_with_same_players"] = "restart_with_same_players"


class DisableCurrentPairAndRestart(_Action):
    type: Literal["disable_current_pair_and_restart"] = "disable_current_pair_and_restart"
    first_player_index: Optional[int] = None


class EliminatePlayer(_Action):
    type: Literal["eliminate_player"] = "eliminate_player"
    index: int


class RecordPeek(_Action):
    type: Literal["record_peek"] = "record_peek"
    index: int


class RecordShowAll(_Action):
    type: Literal["record_show_all"] = "record_show_all"


class GoHome(_Action):
    type: Literal["go_home"] = "go_home"


Action = Annotated[
    Union[
        SetPhase,
        UpdateIntrusConfig,
        SetEasyMode,
        SetMrWhiteCannotStart,
        SetSelectedCategory,
        ToggleCategory,
        SetAntiCheat,
        SetDisplayMode,
        SetDisabledPairs,
        TogglePair,
        StartGame,
        NextReveal,
        RestartWithSamePlayers,
        DisableCurrentPairAndRestart,
        EliminatePlayer,
        RecordPeek,
        RecordShowAll,
        GoHome,
    ],
    Field(discriminator="type"),
]

ACTION_ADAPTER: TypeAdapter[Action] = TypeAdapter(Action)

"""
Models / game.py
Rôle:
- Définir l'état de session (agrégat racine) et la configuration "collante" de la partie.

Champs de SessionState:
- phase: "home" → "setup" → "reveal" → "discussion" → "result".
- players / current_pair / speaking_order: peuplés d'un bloc au lancement d'une manche.
- current_player_index: curseur de révélation (joueur qui regarde sa carte).
- winner: "civil" | "intrus" | None, recalculé après chaque élimination.
- cheat_log: compteurs de coups d'oeil (diagnostic, sans effet sur le jeu).
- config / disabled_pair_ids: réglages conservés par `go_home`.

Notes:
- Tous les modèles sont figés : chaque transition produit un nouvel état
  (`model_copy(update=...)`), les listes ne sont jamais modifiées en place.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .pair import ContentPair
from .player import Player

Phase = Literal["home", "setup", "reveal", "discussion", "result"]
Winner = Literal["civil", "intrus"]
DisplayMode = Literal["both", "icon", "text"]


class RoleDistribution(BaseModel):
    """Nombre de joueurs par rôle pour une manche."""
    civil: int = Field(ge=0)
    undercover: int = Field(ge=0)
    mr_white: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> int:
        return self.civil + self.undercover + self.mr_white


class IntrusConfig(BaseModel):
    """Réglage des intrus tel que saisi dans l'écran de configuration."""
    intrus_count: int = 1
    undercover_enabled: bool = True
    mr_white_enabled: bool = False
    random_split: bool = False  # répartition UC/MW tirée au lancement
    undercover_count: int = 1
    mr_white_count: int = 0

    model_config = ConfigDict(frozen=True)


class AntiCheatSettings(BaseModel):
    allow_peek: bool = True  # un joueur peut revoir sa carte pendant la discussion
    peek_alarm: bool = True  # séquence dissuasive avant le coup d'oeil
    allow_show_all: bool = True  # révéler toutes les cartes d'un coup
    show_all_alarm: bool = True

    model_config = ConfigDict(frozen=True)


class GameConfig(BaseModel):
    """Réglages persistés, conservés quand on revient à l'accueil."""
    intrus: IntrusConfig = Field(default_factory=IntrusConfig)
    easy_mode: bool = False
    selected_categories: List[str] = Field(default_factory=list)  # [] = toutes
    mr_white_cannot_start: bool = True
    anti_cheat: AntiCheatSettings = Field(default_factory=AntiCheatSettings)
    display_mode: DisplayMode = "both"

    model_config = ConfigDict(frozen=True)


class CheatLog(BaseModel):
    """Compteurs de consultation pendant la discussion (index joueur → nombre)."""
    peek_counts: Dict[int, int] = Field(default_factory=dict)
    show_all_count: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def anyone_peeked(self) -> bool:
        return self.show_all_count > 0 or any(c > 0 for c in self.peek_counts.values())


class SessionState(BaseModel):
    phase: Phase = "home"
    players: List[Player] = Field(default_factory=list)
    current_pair: Optional[ContentPair] = None
    current_player_index: int = 0
    speaking_order: List[int] = Field(default_factory=list)
    winner: Optional[Winner] = None
    cheat_log: CheatLog = Field(default_factory=CheatLog)
    config: GameConfig = Field(default_factory=GameConfig)
    disabled_pair_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PersistCommand(BaseModel):
    """Écriture à effectuer par l'appelant (clé de préférence + valeur JSON-compatible)."""
    key: str
    value: Any

    model_config = ConfigDict(frozen=True)


class Transition(BaseModel):
    """Résultat d'un réducteur : nouvel état + écritures de persistance à exécuter."""
    state: SessionState
    commands: List[PersistCommand] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

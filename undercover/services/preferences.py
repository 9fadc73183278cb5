"""
Service: preferences.py
Rôle:
- Persister les réglages qui survivent d'une session à l'autre (fichier JSON unique).
- Seule mémoire durable du moteur : l'état de partie lui-même reste éphémère.

Clés stockées:
- player_profiles, intrus_config, disabled_pairs, selected_categories, easy_mode,
  mr_white_cannot_start, anti_cheat, display_mode, roster, groups.

Politique d'erreur:
- Lecture : fichier absent, illisible ou valeur du mauvais type → valeur par défaut.
- Écriture : échec journalisé (warning) puis ignoré. Pas de retry : ces préférences sont
  un confort local, jamais la source de vérité d'une partie en cours.
"""
from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from undercover.config.settings import settings
from undercover.models.game import AntiCheatSettings, GameConfig, IntrusConfig
from undercover.models.player import PlayerGroup, PlayerProfile, RosterPlayer
from .io_utils import read_json, write_json

logger = logging.getLogger(__name__)

PREF_PLAYER_PROFILES = "player_profiles"
PREF_INTRUS_CONFIG = "intrus_config"
PREF_DISABLED_PAIRS = "disabled_pairs"
PREF_SELECTED_CATEGORIES = "selected_categories"
PREF_EASY_MODE = "easy_mode"
PREF_MR_WHITE_CANNOT_START = "mr_white_cannot_start"
PREF_ANTI_CHEAT = "anti_cheat"
PREF_DISPLAY_MODE = "display_mode"
PREF_ROSTER = "roster"
PREF_GROUPS = "groups"

M = TypeVar("M", bound=BaseModel)


class Preferences:
    """Stockage clé/valeur tolérant, adossé à un fichier JSON."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or settings.PREFERENCES_PATH)
        self._lock = RLock()

    # -----------------------------
    # Accès brut
    # -----------------------------
    def _read_all(self) -> Dict[str, Any]:
        try:
            data = read_json(self.path)
        except (OSError, ValueError) as exc:
            logger.warning("Preferences unreadable, using defaults", extra={"path": str(self.path), "error": str(exc)})
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read_all().get(key, default)

    def save(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            try:
                write_json(self.path, data)
            except (OSError, TypeError) as exc:
                logger.warning("Preferences not saved", extra={"key": key, "path": str(self.path), "error": str(exc)})

    # -----------------------------
    # Accès typés
    # -----------------------------
    def _load_typed(self, key: str, expected: type, default: Any) -> Any:
        value = self.load(key, default)
        return value if isinstance(value, expected) else default

    def _load_model(self, key: str, model: Type[M]) -> M:
        raw = self.load(key)
        if isinstance(raw, dict):
            try:
                return model(**raw)
            except ValidationError:
                logger.warning("Ignoring invalid stored value", extra={"key": key})
        return model()

    def _load_model_list(self, key: str, model: Type[M]) -> List[M]:
        raw = self._load_typed(key, list, [])
        items: List[M] = []
        for entry in raw:
            if not isinstance(entry, dict):
                continue
            try:
                items.append(model(**entry))
            except ValidationError:
                continue
        return items

    def _save_models(self, key: str, items: Iterable[BaseModel]) -> None:
        self.save(key, [item.model_dump() for item in items])

    def load_player_profiles(self) -> List[PlayerProfile]:
        return self._load_model_list(PREF_PLAYER_PROFILES, PlayerProfile)

    def save_player_profiles(self, profiles: Iterable[PlayerProfile]) -> None:
        self._save_models(PREF_PLAYER_PROFILES, profiles)

    def clear_player_profiles(self) -> None:
        self.save(PREF_PLAYER_PROFILES, [])

    def load_intrus_config(self) -> IntrusConfig:
        return self._load_model(PREF_INTRUS_CONFIG, IntrusConfig)

    def load_disabled_pairs(self) -> List[str]:
        return [str(x) for x in self._load_typed(PREF_DISABLED_PAIRS, list, [])]

    def save_disabled_pairs(self, pair_ids: Iterable[str]) -> None:
        self.save(PREF_DISABLED_PAIRS, list(pair_ids))

    def load_selected_categories(self) -> List[str]:
        return [str(x) for x in self._load_typed(PREF_SELECTED_CATEGORIES, list, [])]

    def load_easy_mode(self) -> bool:
        return self._load_typed(PREF_EASY_MODE, bool, False)

    def load_mr_white_cannot_start(self) -> bool:
        return self._load_typed(PREF_MR_WHITE_CANNOT_START, bool, True)

    def load_anti_cheat(self) -> AntiCheatSettings:
        # valeurs partielles complétées par les défauts
        return self._load_model(PREF_ANTI_CHEAT, AntiCheatSettings)

    def load_display_mode(self) -> str:
        mode = self._load_typed(PREF_DISPLAY_MODE, str, "both")
        return mode if mode in ("both", "icon", "text") else "both"

    def load_roster(self) -> List[RosterPlayer]:
        return self._load_model_list(PREF_ROSTER, RosterPlayer)

    def save_roster(self, roster: Iterable[RosterPlayer]) -> None:
        self._save_models(PREF_ROSTER, roster)

    def load_groups(self) -> List[PlayerGroup]:
        return self._load_model_list(PREF_GROUPS, PlayerGroup)

    def save_groups(self, groups: Iterable[PlayerGroup]) -> None:
        self._save_models(PREF_GROUPS, groups)

    def load_game_config(self) -> GameConfig:
        """Reconstitue la configuration collante au démarrage de l'application."""
        return GameConfig(
            intrus=self.load_intrus_config(),
            easy_mode=self.load_easy_mode(),
            selected_categories=self.load_selected_categories(),
            mr_white_cannot_start=self.load_mr_white_cannot_start(),
            anti_cheat=self.load_anti_cheat(),
            display_mode=self.load_display_mode(),
        )

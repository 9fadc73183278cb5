"""
Session store
=============

Conteneur d'état de la session en cours (un appareil, une table).

- `dispatch(action)` applique le réducteur pur (`session_engine.reduce`), remplace l'état
  d'un bloc, exécute les écritures de préférences rendues par la transition, puis
  notifie les abonnés.
- Les abonnés (`subscribe`) reçoivent le nouvel état ; la fonction retournée les désabonne.
- `peek` / `show_all` enchaînent la séquence dissuasive (si activée) et l'enregistrement
  du coup d'oeil, qui n'a lieu qu'une fois la séquence terminée.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, List, Optional

from undercover.config.settings import settings
from undercover.models.actions import Action, RecordPeek, RecordShowAll, SetDisabledPairs
from undercover.models.game import PersistCommand, SessionState
from .catalog import CATALOG, PairCatalog
from .deterrent import DeterrentProvider, SilentDeterrent
from .pair_config import decode_pair_config, encode_pair_config
from .preferences import Preferences
from .session_engine import record_peek, record_show_all, reduce

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


@dataclass
class GameStore:
    preferences: Optional[Preferences] = None
    catalog: Optional[PairCatalog] = None
    rng: Optional[Any] = None
    deterrent: DeterrentProvider = field(default_factory=SilentDeterrent)
    state: SessionState = field(default_factory=SessionState)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_preferences(cls, preferences: Optional[Preferences] = None, **kwargs: Any) -> "GameStore":
        """Démarre à l'accueil avec la configuration persistée."""
        prefs = preferences or Preferences()
        state = SessionState(config=prefs.load_game_config(), disabled_pair_ids=prefs.load_disabled_pairs())
        return cls(preferences=prefs, state=state, **kwargs)

    @property
    def active_catalog(self) -> PairCatalog:
        return self.catalog if self.catalog is not None else CATALOG

    # -----------------------------
    # Abonnements
    # -----------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # -----------------------------
    # Dispatch
    # -----------------------------
    def dispatch(self, action: Action) -> SessionState:
        with self._lock:
            transition = reduce(self.state, action, self.active_catalog, self.rng)
            self.state = transition.state
            self._persist(transition.commands)
            listeners = list(self._listeners)
            state = self.state
        for listener in listeners:
            listener(state)
        return state

    def _persist(self, commands: List[PersistCommand]) -> None:
        if self.preferences is None:
            return
        for command in commands:
            self.preferences.save(command.key, command.value)

    # -----------------------------
    # Anti-triche
    # -----------------------------
    def peek(self, index: int) -> None:
        """Un joueur revoit sa carte ; la séquence dissuasive précède l'enregistrement."""
        record_peek(self.state, index)  # lève SessionError avant toute séquence

        def done() -> None:
            self.dispatch(RecordPeek(index=index))

        if self.state.config.anti_cheat.peek_alarm:
            self.deterrent.run(settings.DETERRENT_SECONDS, done)
        else:
            done()

    def show_all(self) -> None:
        record_show_all(self.state)

        def done() -> None:
            self.dispatch(RecordShowAll())

        if self.state.config.anti_cheat.show_all_alarm:
            self.deterrent.run(settings.DETERRENT_SECONDS, done)
        else:
            done()

    # -----------------------------
    # Codes de partage
    # -----------------------------
    def export_pair_code(self) -> str:
        return encode_pair_config(self.state.disabled_pair_ids, self.active_catalog)

    def import_pair_code(self, code: str) -> bool:
        """Applique un code reçu. False si le code est invalide (rien n'est modifié)."""
        decoded = decode_pair_config(code, self.active_catalog)
        if decoded is None:
            logger.info("Invalid pair code rejected", extra={"code_length": len(code or "")})
            return False
        ordered = [pid for pid in self.active_catalog.ids() if pid in decoded]
        self.dispatch(SetDisabledPairs(pair_ids=ordered))
        return True

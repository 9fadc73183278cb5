"""
Service: roster.py
Rôle:
- Gérer le répertoire de joueurs et les groupes nommés ("Charger un groupe" au setup).

Comportement:
- `resolve_group_members` conserve l'ordre du groupe et ignore les ids disparus du répertoire.
- `add_to_roster` évite les doublons par nom (insensible à la casse).
- Un groupe n'est proposé au chargement que s'il compte entre MIN_PLAYERS et
  MAX_PLAYERS joueurs encore présents dans le répertoire.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple
from uuid import uuid4

from undercover.config.settings import settings
from undercover.models.player import PlayerGroup, PlayerProfile, RosterPlayer


def resolve_group_members(player_ids: Iterable[str], roster: Sequence[RosterPlayer]) -> List[RosterPlayer]:
    by_id = {r.id: r for r in roster}
    return [by_id[pid] for pid in player_ids if pid in by_id]


def loadable_groups(groups: Iterable[PlayerGroup], roster: Sequence[RosterPlayer]) -> List[PlayerGroup]:
    return [
        g for g in groups
        if settings.MIN_PLAYERS <= len(resolve_group_members(g.player_ids, roster)) <= settings.MAX_PLAYERS
    ]


def add_to_roster(
    roster: Sequence[RosterPlayer],
    profiles: Iterable[PlayerProfile],
) -> Tuple[List[RosterPlayer], List[str]]:
    """
    Ajoute les profils absents du répertoire.

    Returns:
        (nouveau répertoire, ids des profils dans l'ordre donné, existants ou créés)
    """
    updated = list(roster)
    by_name = {r.name.strip().lower(): r for r in updated}
    ids: List[str] = []
    for profile in profiles:
        key = profile.name.strip().lower()
        if not key:
            continue
        existing = by_name.get(key)
        if existing is None:
            existing = RosterPlayer(id=uuid4().hex[:8], name=profile.name.strip(), icon=profile.icon, color=profile.color)
            updated.append(existing)
            by_name[key] = existing
        ids.append(existing.id)
    return updated, ids


def create_group(
    name: str,
    roster: Sequence[RosterPlayer],
    profiles: Iterable[PlayerProfile],
) -> Tuple[PlayerGroup, List[RosterPlayer]]:
    """Crée un groupe à partir des joueurs saisis (ajoutés au répertoire si besoin)."""
    label = name.strip()
    if not label:
        raise ValueError("Group name is required")
    updated, ids = add_to_roster(roster, profiles)
    ids = list(dict.fromkeys(ids))
    if len(ids) < settings.MIN_PLAYERS:
        raise ValueError(f"A group needs at least {settings.MIN_PLAYERS} players")
    return PlayerGroup(id=uuid4().hex[:8], name=label, player_ids=ids), updated


def group_profiles(group: PlayerGroup, roster: Sequence[RosterPlayer]) -> List[PlayerProfile]:
    """Identités prêtes pour `start_game` (noms / icônes / couleurs)."""
    return [PlayerProfile(name=r.name, icon=r.icon, color=r.color) for r in resolve_group_members(group.player_ids, roster)]

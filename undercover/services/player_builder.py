"""
Service: player_builder.py
Rôle:
- Construire les joueurs d'une manche à partir des identités saisies et de la paire tirée.

Comportement:
- Les rôles viennent de `assign_roles` (déjà mélangés) et sont associés aux noms par
  position : c'est le mélange, pas l'ordre de saisie, qui décide qui reçoit quoi.
- civil → side_a/label_a ; undercover → side_b/label_b ; Mr. White → aucun contenu.
- Un nouvel id est généré pour chaque joueur à chaque manche.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence
from uuid import uuid4

from undercover.models.pair import ContentPair
from undercover.models.player import MR_WHITE, UNDERCOVER, Player, Role
from .roles_engine import assign_roles


def _content_for(role: Role, pair: ContentPair) -> tuple[Optional[str], Optional[str]]:
    if role == MR_WHITE:
        return None, None
    if role == UNDERCOVER:
        return pair.side_b, pair.label_b
    return pair.side_a, pair.label_a


def create_players(
    names: Sequence[str],
    icons: Sequence[str],
    colors: Sequence[str],
    pair: ContentPair,
    undercover_count: int,
    mr_white_count: int,
    rng: Optional[Any] = None,
) -> List[Player]:
    if not (len(names) == len(icons) == len(colors)):
        raise ValueError("names, icons and colors must have the same length")

    roles = assign_roles(len(names), undercover_count, mr_white_count, rng)
    players: List[Player] = []
    for name, icon, color, role in zip(names, icons, colors, roles):
        content, label = _content_for(role, pair)
        players.append(Player(
            id=uuid4().hex[:8],
            name=name,
            role=role,
            content=content,
            content_label=label,
            icon=icon,
            color=color,
        ))
    return players

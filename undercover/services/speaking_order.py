"""
Service: speaking_order.py
Rôle:
- Tirer l'ordre de parole de la discussion.

Règle "Mr. White ne commence pas":
- Après le mélange, si le premier joueur est Mr. White, on l'échange avec le premier
  joueur suivant qui ne l'est pas. Une seule réparation ciblée (pas de re-tirage) :
  le reste de l'ordre garde son aléa.
- Si tous les joueurs sont Mr. White, l'ordre est laissé tel quel.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from undercover.models.player import MR_WHITE, Player
from undercover.utils.shuffle import shuffle


def build_speaking_order(
    players: Sequence[Player],
    mr_white_cannot_start: bool = True,
    rng: Optional[Any] = None,
) -> List[int]:
    order = shuffle(range(len(players)), rng)
    if mr_white_cannot_start and order and players[order[0]].role == MR_WHITE:
        for pos in range(1, len(order)):
            if players[order[pos]].role != MR_WHITE:
                order[0], order[pos] = order[pos], order[0]
                break
    return order

# undercover/services/roles_engine.py
"""
Service: roles_engine.py
Rôle:
- Convertir (nombre de joueurs, réglage des intrus) en répartition de rôles valide.
- Distribuer les rôles aléatoirement.

Invariants:
- civil + undercover + mr_white == nombre de joueurs.
- undercover + mr_white <= nombre de joueurs // 2 : les civils restent majoritaires (ou à égalité).
- `get_role_distribution` ne lève jamais : les demandes hors bornes sont réduites en silence.
"""
from __future__ import annotations

from typing import Any, List, Optional, Tuple

from undercover.models.game import IntrusConfig, RoleDistribution
from undercover.models.player import CIVIL, MR_WHITE, UNDERCOVER, Role
from undercover.utils.shuffle import get_rng, shuffle


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def max_special(player_count: int) -> int:
    """Nombre maximal d'intrus (undercover + Mr. White) pour une table."""
    return max(0, player_count // 2)


def get_role_distribution(player_count: int, undercover_count: int, mr_white_count: int) -> RoleDistribution:
    """
    Borne les rôles spéciaux puis déduit le nombre de civils.

    Les undercovers sont servis en premier : Mr. White se partage le reste du quota.
    """
    cap = max_special(player_count)
    uc = _clamp(undercover_count, 0, cap)
    mw = _clamp(mr_white_count, 0, cap - uc)
    return RoleDistribution(civil=max(0, player_count - uc - mw), undercover=uc, mr_white=mw)


def clamp_intrus_counts(player_count: int, config: IntrusConfig) -> IntrusConfig:
    """
    Normalise le réglage saisi dans l'écran de configuration.

    - intrus_count borné à [1, player_count // 2] ;
    - un seul rôle actif → il prend tous les intrus ;
    - répartition aléatoire → sous-compteurs laissés tels quels (résolus au lancement) ;
    - répartition manuelle → mr_white = intrus - undercover, saturé à 0.
    """
    ic = _clamp(config.intrus_count, 1, max(1, max_special(player_count)))
    uc = config.undercover_count
    mw = config.mr_white_count

    if not config.mr_white_enabled:
        uc, mw = ic, 0
    elif not config.undercover_enabled:
        uc, mw = 0, ic
    elif not config.random_split and uc + mw != ic:
        mw = ic - uc
        if mw < 0:
            uc, mw = ic, 0
        elif uc < 0:
            uc, mw = 0, ic

    return config.model_copy(update={"intrus_count": ic, "undercover_count": uc, "mr_white_count": mw})


def compute_final_counts(config: IntrusConfig, rng: Optional[Any] = None) -> Tuple[int, int]:
    """Résout (undercover, mr_white) pour la manche qui démarre."""
    ic = config.intrus_count
    if not config.undercover_enabled:
        return 0, ic
    if not config.mr_white_enabled:
        return ic, 0
    if not config.random_split:
        return config.undercover_count, config.mr_white_count
    final_mw = get_rng(rng).randint(0, ic)
    return ic - final_mw, final_mw


def assign_roles(
    player_count: int,
    undercover_count: int,
    mr_white_count: int,
    rng: Optional[Any] = None,
) -> List[Role]:
    """Liste mélangée des rôles, de longueur `player_count`."""
    dist = get_role_distribution(player_count, undercover_count, mr_white_count)
    roles: List[Role] = [CIVIL] * dist.civil + [UNDERCOVER] * dist.undercover + [MR_WHITE] * dist.mr_white
    return shuffle(roles, rng)

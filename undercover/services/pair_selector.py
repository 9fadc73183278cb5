"""
Service: pair_selector.py
Rôle:
- Tirer au sort la paire de contenus d'une manche.

Règles:
- Pool = paires des catégories demandées (toutes si la liste est vide) et non désactivées.
- Si ce pool est vide (tout a été désactivé), on ignore les désactivations et on
  re-filtre par catégorie seulement : la partie ne doit jamais bloquer faute de paire.
- Tirage uniforme dans le pool final.
- Un filtre de catégories sans aucune paire est une erreur de catalogue (`CatalogError`).
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from undercover.models.pair import ContentPair
from undercover.utils.shuffle import get_rng
from .catalog import CATALOG, CatalogError, PairCatalog

logger = logging.getLogger(__name__)


def pick_pair(
    categories: Iterable[str] = (),
    disabled_ids: Iterable[str] = (),
    catalog: Optional[PairCatalog] = None,
    rng: Optional[Any] = None,
) -> ContentPair:
    source = catalog if catalog is not None else CATALOG
    wanted = set(categories)
    disabled = set(disabled_ids)

    eligible = [p for p in source.pairs if not wanted or p.category in wanted]
    pool = [p for p in eligible if p.id not in disabled]
    if not pool:
        if eligible:
            logger.warning(
                "Every eligible pair is disabled, ignoring disabled list",
                extra={"categories": sorted(wanted), "eligible": len(eligible)},
            )
        pool = eligible
    if not pool:
        raise CatalogError(f"No pair available for categories {sorted(wanted)}")

    pair = get_rng(rng).choice(pool)
    logger.debug("Pair drawn", extra={"pair_id": pair.id, "pool": len(pool)})
    return pair

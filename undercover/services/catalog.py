"""
Service: catalog.py
Rôle:
- Charger en mémoire le référentiel des paires de contenus (catalogue statique).
- Exposer `CATALOG.pairs`, `CATALOG.categories`, `CATALOG.get(id)` et `CATALOG.by_category(cat)`.

Fichier source:
- undercover/data/pairs.json → {"categories":[{id,label,icon}], "pairs":[{id,category,side_a,side_b,label_a,label_b}]}

Remarques:
- L'ordre des paires est stable et fait partie du format des codes de partage
  (`pair_config`) : ajouter/retirer/réordonner des paires invalide les anciens codes.
- Invariants vérifiés au chargement : ids uniques, catégories déclarées.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from undercover.config.settings import settings
from undercover.models.pair import Category, ContentPair
from .io_utils import read_json

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(settings.CATALOG_PATH)


class CatalogError(RuntimeError):
    """Catalogue mal formé ou filtre de catégories sans aucune paire."""


class PairCatalog:
    """Catalogue ordonné et immuable de paires.

    Exemple d'entrée:
    {
      "id": "a1",
      "category": "animals",
      "side_a": "🐶", "side_b": "🐱",
      "label_a": "Chien", "label_b": "Chat"
    }
    """

    def __init__(self, pairs: Iterable[ContentPair] = (), categories: Iterable[Category] = ()):
        self.pairs: tuple[ContentPair, ...] = tuple(pairs)
        self.categories: tuple[Category, ...] = tuple(categories)
        self._index: Dict[str, ContentPair] = {}
        for pair in self.pairs:
            if pair.id in self._index:
                raise CatalogError(f"Duplicate pair id {pair.id!r}")
            self._index[pair.id] = pair
        declared = {c.id for c in self.categories}
        if declared:
            unknown = sorted({p.category for p in self.pairs} - declared)
            if unknown:
                raise CatalogError(f"Pairs reference undeclared categories: {unknown}")

    @classmethod
    def from_pairs(cls, pairs: Iterable[ContentPair | Dict[str, Any]]) -> "PairCatalog":
        """Construit un catalogue en mémoire (catégories déduites de l'ordre d'apparition)."""
        items = [p if isinstance(p, ContentPair) else ContentPair(**p) for p in pairs]
        seen: List[str] = []
        for p in items:
            if p.category not in seen:
                seen.append(p.category)
        return cls(items, [Category(id=c, label=c, icon="") for c in seen])

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PairCatalog":
        """Charge le JSON et valide chaque entrée."""
        source = path or CATALOG_PATH
        raw = read_json(source) or {"categories": [], "pairs": []}
        try:
            categories = [Category(**c) for c in raw.get("categories", [])]
            pairs = [ContentPair(**p) for p in raw.get("pairs", [])]
        except (TypeError, ValidationError) as exc:
            raise CatalogError(f"Invalid catalog {source}: {exc}") from exc
        logger.debug("Catalog loaded", extra={"path": str(source), "pairs": len(pairs)})
        return cls(pairs, categories)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self):
        return iter(self.pairs)

    def get(self, pair_id: str) -> ContentPair | None:
        """Retourne la paire ou None si id inconnu."""
        return self._index.get(pair_id)

    def ids(self) -> List[str]:
        return [p.id for p in self.pairs]

    def by_category(self, category: str) -> List[ContentPair]:
        return [p for p in self.pairs if p.category == category]


CATALOG = PairCatalog.load()

"""
Utils: shuffle.py
Rôle:
- Fournir la permutation aléatoire utilisée par tous les tirages du moteur
  (rôles, ordre de parole).

Comportement:
- Fisher–Yates : pour i du dernier index jusqu'à 1, tirer j uniforme dans [0, i]
  puis échanger i et j. Chaque permutation est équiprobable.
- La séquence d'entrée n'est jamais modifiée : on travaille sur une copie.
- `rng` permet d'injecter un `random.Random(seed)` (tests / rejouabilité) ;
  par défaut on utilise le générateur global du module `random`.
"""
import random
from typing import Any, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def get_rng(rng: Optional[Any] = None) -> Any:
    """Source aléatoire effective : `rng` si fourni, sinon le module `random`."""
    return rng if rng is not None else random


def shuffle(items: Sequence[T], rng: Optional[Any] = None) -> List[T]:
    """
    Retourne une copie mélangée de `items`.

    Args:
        items: séquence à permuter (non modifiée).
        rng: objet exposant `randint(a, b)` (ex: `random.Random(42)`).

    Returns:
        List[T]: nouvelle liste, permutation uniforme de `items`.
    """
    source = get_rng(rng)
    pool = list(items)
    for i in range(len(pool) - 1, 0, -1):
        j = source.randint(0, i)
        pool[i], pool[j] = pool[j], pool[i]
    return pool

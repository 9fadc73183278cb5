"""
Service: pair_config.py
Rôle:
- Encoder / décoder l'ensemble des paires désactivées en un code hexadécimal court,
  à copier-coller d'un appareil à l'autre (SMS, messagerie…).

Format (contrat de compatibilité):
- Une paire = un bit, dans l'ordre du catalogue.
- Bit à 1 = paire ACTIVÉE, 0 = désactivée (inverse de l'ensemble en entrée).
- Bits regroupés par octets, poids fort d'abord : la paire i est le bit (7 - i % 8)
  de l'octet i // 8.
- Octets rendus en hexadécimal majuscule, 2 caractères chacun.
  Ex: 183 paires → 23 octets → 46 caractères.

Notes:
- Changer l'ordre ou la taille du catalogue invalide les anciens codes (décodage → None).
- `decode_pair_config` ne lève jamais : toute entrée invalide renvoie None.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Set

from .catalog import CATALOG, PairCatalog

_HEX_RE = re.compile(r"^[0-9A-F]+$")


def code_length(catalog: Optional[PairCatalog] = None) -> int:
    """Longueur exacte (en caractères) d'un code pour ce catalogue."""
    source = catalog if catalog is not None else CATALOG
    return 2 * ((len(source) + 7) // 8)


def encode_pair_config(disabled_ids: Iterable[str], catalog: Optional[PairCatalog] = None) -> str:
    source = catalog if catalog is not None else CATALOG
    disabled = set(disabled_ids)
    data = bytearray((len(source) + 7) // 8)
    for i, pair in enumerate(source.pairs):
        if pair.id not in disabled:
            data[i // 8] |= 1 << (7 - i % 8)
    return data.hex().upper()


def decode_pair_config(code: str, catalog: Optional[PairCatalog] = None) -> Optional[Set[str]]:
    source = catalog if catalog is not None else CATALOG
    if not isinstance(code, str):
        return None
    text = code.strip().upper()
    if not _HEX_RE.match(text) or len(text) != code_length(source):
        return None

    data = bytes.fromhex(text)
    return {
        pair.id
        for i, pair in enumerate(source.pairs)
        if not (data[i // 8] >> (7 - i % 8)) & 1
    }

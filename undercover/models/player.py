"""
Models / player.py
Rôle:
- Définir le joueur d'une manche (rôle + contenu secret) et les profils persistés.

Champs du joueur:
- id: identifiant unique, régénéré à chaque manche.
- name / icon / color: identité visuelle saisie à la configuration.
- role: "civil" | "undercover" | "mrwhite".
- content / content_label: None exactement quand le rôle est "mrwhite".
- eliminated: seul champ qui évolue après création (False → True).
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["civil", "undercover", "mrwhite"]

CIVIL: Role = "civil"
UNDERCOVER: Role = "undercover"
MR_WHITE: Role = "mrwhite"
INTRUS_ROLES = frozenset({UNDERCOVER, MR_WHITE})


class Player(BaseModel):
    """Joueur d'une manche. Figé : une élimination produit une nouvelle instance."""
    id: str
    name: str
    role: Role
    content: Optional[str] = None
    content_label: Optional[str] = None
    icon: str
    color: str
    eliminated: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_intrus(self) -> bool:
        return self.role in INTRUS_ROLES


class PlayerProfile(BaseModel):
    """Identité réutilisée d'une partie à l'autre (pré-remplissage du setup)."""
    name: str
    icon: str
    color: str


class RosterPlayer(BaseModel):
    """Joueur enregistré dans le répertoire persistant."""
    id: str
    name: str
    icon: str
    color: str


class PlayerGroup(BaseModel):
    """Groupe nommé de joueurs du répertoire (ex: "Cousins", "Classe de CM2")."""
    id: str
    name: str
    player_ids: List[str] = Field(default_factory=list)

"""
Models / pair.py
Rôle:
- Définir une paire de contenus (civil / undercover) et les descripteurs de catégories.

Notes:
- `side_a` / `side_b` sont des références opaques : un emoji, un mot court,
  ou une URL d'image (voir `is_image_url`). Le moteur les transmet sans les lire.
- Les modèles sont figés : le catalogue est une donnée en lecture seule.
"""
from pydantic import BaseModel, ConfigDict, model_validator


def is_image_url(value: str) -> bool:
    """True si la référence de contenu désigne une image distante."""
    return value.startswith("http://") or value.startswith("https://")


class Category(BaseModel):
    """Descripteur de catégorie affiché dans l'écran de configuration."""
    id: str
    label: str
    icon: str

    model_config = ConfigDict(frozen=True)


class ContentPair(BaseModel):
    """Duo de contenus proches : `side_a` pour les civils, `side_b` pour l'undercover."""
    id: str  # identifiant unique dans tout le catalogue
    category: str  # id d'une `Category`
    side_a: str  # contenu "commun" (civils)
    side_b: str  # contenu "leurre" (undercover)
    label_a: str
    label_b: str

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _distinct_sides(self) -> "ContentPair":
        if self.side_a == self.side_b:
            raise ValueError(f"pair {self.id!r} uses the same content on both sides")
        return self

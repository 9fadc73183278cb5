"""
Configuration du moteur (Settings)
==================================

Rôle
----
- Centraliser les paramètres du moteur de partie (chemins, bornes de joueurs, logs…).
- Les valeurs par défaut conviennent pour un usage local sur un seul appareil.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement
  (préfixe `UNDERCOVER_`).

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les services importent `from undercover.config.settings import settings`.

Exemples de `.env`
------------------
UNDERCOVER_DATA_DIR="/var/opt/undercover/data"
UNDERCOVER_PREFERENCES_PATH="/home/me/.undercover/preferences.json"
UNDERCOVER_MIN_PLAYERS=3
UNDERCOVER_LOG_LEVEL="DEBUG"
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    APP_NAME: str = "Undercover"

    # Répertoire des données statiques (catalogue de paires)
    # Par défaut: <repo>/undercover/data
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
    # Catalogue ordonné des paires : l'ordre fait partie du format des codes de partage
    CATALOG_PATH: str = os.path.join(DATA_DIR, "pairs.json")

    # Préférences persistées entre deux sessions (profils, compteurs, filtres…)
    PREFERENCES_PATH: str = os.path.join(os.path.expanduser("~"), ".undercover", "preferences.json")

    # Bornes de la table (le minimum garantit au moins un civil)
    MIN_PLAYERS: int = 3
    MAX_PLAYERS: int = 16

    # Durée de la séquence dissuasive avant un coup d'oeil (secondes)
    DETERRENT_SECONDS: float = 1.5

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="UNDERCOVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Instance unique importable partout : `settings`
settings = Settings()

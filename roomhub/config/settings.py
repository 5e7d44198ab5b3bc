"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du serveur de rooms (nom, host/port, CORS, logs,
  secret Unity, catalogue d'obstacles…).
- Les valeurs par défaut conviennent pour un environnement de dev local.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les services/routers importent `from roomhub.config.settings import settings`.

Bonnes pratiques
----------------
- *Ne commitez pas* une valeur réelle de `UNITY_TOKEN`. Utilisez `.env`.
- `UNITY_TOKEN` vide = la route /victory reste ouverte (comportement historique).
- `OBSTACLE_CATALOG` se passe en JSON dans l'environnement.

Exemples de `.env`
------------------
APP_NAME="Roomhub (Staging)"
PORT=3001
CLIENT_URL="https://jeu.example.org"
LOG_LEVEL="DEBUG"
UNITY_TOKEN="mettre-une-valeur-secrète-en-prod"
OBSTACLE_CATALOG='["laser", "piques", "pendule", "trappe", "feu", "glace", "mur"]'
"""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Roomhub"
    # Bind réseau (FastAPI / Uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Origine autorisée par le CORS (front web des guides)
    CLIENT_URL: str = "http://localhost:5173"

    # Niveau du logger racine (DEBUG, INFO, WARNING…)
    LOG_LEVEL: str = "INFO"

    # Secret partagé avec le client Unity pour POST /victory (None = pas de contrôle)
    UNITY_TOKEN: Optional[str] = None

    # Taille max d'une trame WebSocket entrante (octets)
    MAX_MESSAGE_BYTES: int = 1_000_000

    # Nombre de tirages de PIN avant abandon en cas de collision
    PIN_MAX_ATTEMPTS: int = 8

    # Pseudo attribué tant que le joueur n'a pas choisi le sien
    DEFAULT_PSEUDO: str = "Anonyme"

    # Catalogue fixe des obstacles répartis entre les guides (ordre stable)
    OBSTACLE_CATALOG: List[str] = [
        "laser",
        "spikes",
        "pendulum",
        "trapdoor",
        "fire",
        "ice",
        "wall",
    ]

    # Monte les routes /debug/* (pratique en dev)
    DEBUG_ROUTES: bool = False

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Instance unique importable partout : `settings`
settings = Settings()

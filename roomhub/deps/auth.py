"""
Dépendance d'authentification Unity
===================================

Objectif
--------
Fournir une *dependency* FastAPI `unity_required` qui protège la seule route
sensible (`POST /victory`) par un secret partagé avec le client Unity :
`Authorization: Bearer <settings.UNITY_TOKEN>`.

Comportement & codes retour
---------------------------
- `UNITY_TOKEN` non configuré → contrôle désactivé (True).
- 401 si aucun Bearer n'est fourni.
- 403 si le Bearer ne correspond pas.
- True sinon.

Notes
-----
- On garde `HTTPBearer(auto_error=False)` pour faire remonter 401/403 propres.
- Comparaison en temps constant (`secrets.compare_digest`).
"""
from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from roomhub.config.settings import settings

# Schéma Bearer (désactive l'erreur auto pour qu'on rende nos 401/403)
bearer = HTTPBearer(auto_error=False)


def unity_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
):
    expected = settings.UNITY_TOKEN
    if not expected:
        return True

    if credentials and (credentials.scheme or "").lower() == "bearer":
        if secrets.compare_digest(credentials.credentials, expected):
            return True
        raise HTTPException(status_code=403, detail="Invalid token")

    raise HTTPException(status_code=401, detail="Unity authentication required")

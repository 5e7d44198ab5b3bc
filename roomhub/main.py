"""
Application FastAPI — Point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le logging et le CORS pour le front,
- Monte les routeurs (WebSocket /ws, injection Unity, santé, debug optionnel),
- Liste les routes au démarrage.

Notes
-----
- Lancement : `uvicorn roomhub.main:app --host 0.0.0.0 --port 3001`.
- `debug_ws` est monté seulement si `settings.DEBUG_ROUTES` est True (pratique en dev).
- Garder `settings.CLIENT_URL` en phase avec l'URL du front.
- ⚠️ Le middleware CORS doit être ajouté AVANT les include_router.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roomhub.config.settings import settings
from roomhub.routes.debug_ws import router as debug_ws_router
from roomhub.routes.health import router as health_router
from roomhub.routes.unity import router as unity_router
from roomhub.routes.websocket import router as ws_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("roomhub")

# --- App FastAPI principale  ---
app = FastAPI(title=settings.APP_NAME)

# ===========================
# CORS
# ===========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],  # ← front des guides
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ===========================
# Montage des routers
# ===========================
app.include_router(ws_router)                  # WebSocket endpoint (/ws)
app.include_router(unity_router)               # POST /victory, POST /timer
app.include_router(health_router)

# Router de debug optionnel (en dev)
if settings.DEBUG_ROUTES:
    app.include_router(debug_ws_router)


# --- Racine utile pour "ping" simple (sans /health) ---
@app.get("/")
async def root():
    """Ping basique : permet de vérifier que l'app tourne."""
    return {"ok": True, "service": "roomhub"}


# --- Hook de démarrage ---
@app.on_event("startup")
async def list_routes():
    """Liste les routes (path + méthodes) dans les logs (diagnostic)."""
    logger.info("== Registered routes ==")
    for r in app.routes:
        path = getattr(r, "path", None)
        if path is None:
            # Certains objets routes n'exposent pas de path; on ignore.
            continue
        methods = getattr(r, "methods", None)
        logger.info("%s %s", path, sorted(methods) if methods else "WS")

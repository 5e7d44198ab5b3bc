"""
Utilitaires d'encodage JSON (rapides) basés sur orjson.
- dumps_text(data) → str (trame prête pour `send_text`)
- loads_text(raw)  → Any | None (None si la trame n'est pas du JSON valide)

Attention:
- orjson renvoie/attend des bytes; on décode en UTF-8 pour le transport texte.
- Pas d'indentation (trames compactes).
"""
from typing import Any

import orjson as json


def dumps_text(data: Any) -> str:
    """Sérialise `data` en texte JSON compact."""
    return json.dumps(data).decode("utf-8")


def loads_text(raw: str | bytes) -> Any:
    """Désérialise une trame; renvoie None si elle n'est pas du JSON."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None

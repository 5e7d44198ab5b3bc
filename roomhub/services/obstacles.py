"""
Service: obstacles.py
Rôle:
- Répartir équitablement le catalogue fixe d'obstacles entre les guides d'une room.

Comportement:
- G guides, K obstacles → base = K // G, extra = K % G.
- Les `extra` premiers guides (ordre d'arrivée) reçoivent base + 1 obstacles,
  les suivants base. Tout le catalogue est distribué, sans doublon ni trou.
- G = 0 → aucune part (personne à notifier).
- Le mélange est un Fisher–Yates (`Random.shuffle`), refait à chaque appel :
  une répartition ne dépend jamais de la précédente.
- `rng` permet de rejouer le tirage (déterministe pour les tests).
"""
import random
from typing import List, Optional, Sequence


def partition_obstacles(
    guide_count: int,
    catalog: Sequence[str],
    rng: Optional[random.Random] = None,
) -> List[List[str]]:
    """
    Découpe une permutation aléatoire de `catalog` en `guide_count` parts.

    Returns:
        List[List[str]]: une part par guide, dans l'ordre des guides.
    """
    if guide_count <= 0:
        return []

    rng = rng or random
    pool = list(catalog)
    rng.shuffle(pool)

    base, extra = divmod(len(pool), guide_count)
    slices: List[List[str]] = []
    start = 0
    for i in range(guide_count):
        size = base + 1 if i < extra else base
        slices.append(pool[start:start + size])
        start += size
    return slices

"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Estadísticas por vendedor y comisiones                        ║
║                                                                              ║
║  TABLA DE COMISIONES (única usada en el cálculo):                            ║
║    0 visitas      → 0%                                                       ║
║    1 - 4          → 10%                                                      ║
║    5 - 9          → 15%                                                      ║
║    10 - 14        → 20%                                                      ║
║    15 o más       → 25%                                                      ║
║                                                                              ║
║  Se recalcula en cada lectura, sin cache ni actualización incremental.       ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from typing import Dict, Iterable, List, Optional

from models.record import ContactedFlag, SoldStatus, normalize_sold

# (mínimo de visitas, porcentaje), de mayor a menor
COMMISSION_TIERS = [
    (15, 25),
    (10, 20),
    (5, 15),
    (1, 10),
    (0, 0),
]

TIER_DISPLAY = [
    {"range": "0", "percentage": "0%"},
    {"range": "1 - 4", "percentage": "10%"},
    {"range": "5 - 9", "percentage": "15%"},
    {"range": "10 - 14", "percentage": "20%"},
    {"range": "15 o más", "percentage": "25%"},
]

# Tabla de un panel viejo, inconsistente con COMMISSION_TIERS (los rangos
# 0-45 y 45-59 se solapan en 45). No se usa para calcular.
LEGACY_DISPLAY_TIERS = [
    {"range": "0 - 45", "percentage": "0%"},
    {"range": "45 - 59", "percentage": "10%"},
    {"range": "60 o más", "percentage": "25%"},
]


def commission_for(total: int) -> int:
    """Porcentaje de comisión según la cantidad total de visitas."""
    for minimum, percentage in COMMISSION_TIERS:
        if total >= minimum:
            return percentage
    return 0


def _empty_stat(name: str) -> Dict:
    return {
        "name": name,
        "salesCount": 0,
        "contactedCount": 0,
        "vendidoCount": 0,
        "rechazadoCount": 0,
        "pendienteCount": 0,
        "commissionPercentage": 0,
    }


def compute_stats(records: Iterable[Dict], users: Optional[Iterable[Dict]] = None) -> List[Dict]:
    """
    Una entrada por vendedor. Si se pasan users, cada usuario conocido
    arranca en cero aunque no tenga visitas en el ciclo.
    """
    stats: Dict[str, Dict] = {}

    for user in users or []:
        username = user.get("username")
        if username and username not in stats:
            stats[username] = _empty_stat(username)

    for r in records:
        name = r.get("inCharge", "")
        if name not in stats:
            stats[name] = _empty_stat(name)
        entry = stats[name]

        entry["salesCount"] += 1
        if r.get("contacted") == ContactedFlag.SI.value:
            entry["contactedCount"] += 1

        status = normalize_sold(r.get("sold"))
        if status == SoldStatus.SI:
            entry["vendidoCount"] += 1
        elif status == SoldStatus.NO:
            entry["rechazadoCount"] += 1
        elif status == SoldStatus.PENDIENTE:
            entry["pendienteCount"] += 1

    for entry in stats.values():
        entry["commissionPercentage"] = commission_for(entry["salesCount"])

    return list(stats.values())


def top_performer(stats: List[Dict]) -> Optional[Dict]:
    """Vendedor con más visitas (> 0). En empate gana el primero del sort estable."""
    ranked = sorted(stats, key=lambda s: s["salesCount"], reverse=True)
    if ranked and ranked[0]["salesCount"] > 0:
        return ranked[0]
    return None

# app/services/recommendation_service.py
from typing import List

from app.core.constants import (
    IMAGE_SHARE_THRESHOLD,
    SCRIPT_SHARE_THRESHOLD,
    THIRD_PARTY_SHARE_THRESHOLD,
)
from app.models import HostingInfo
from app.services.resource_service import Category, PageWeight

HEAVY_IMAGES = "🖼️ Vos images sont très lourdes. Passez-les au format WebP et compressez-les."
HEAVY_SCRIPTS = "📜 Les scripts JavaScript sont lourds. Assurez-vous de ne charger que le nécessaire."
NOT_GREEN = (
    "🌱 Votre hébergeur n'est pas répertorié comme vert. "
    "Changer pour un hébergeur vert est l'action la plus impactante."
)
HEAVY_THIRD_PARTY = (
    "🔌 Les ressources tierces (publicités, trackers, widgets) pèsent lourd. "
    "Limitez les services externes au strict nécessaire."
)
WELL_OPTIMIZED = "✅ Excellent ! Votre site semble bien optimisé."


def share(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return part / total


def build_recommendations(
    weight: PageWeight,
    hosting: HostingInfo,
    track_third_party: bool = True,
) -> List[str]:
    """
    Evaluates the advisory rules in order. Rules are independent, any subset
    may fire; when none does the list holds only the positive message.
    """
    total = weight.total_bytes
    recommendations = []
    if share(weight.breakdown[Category.IMAGES], total) > IMAGE_SHARE_THRESHOLD:
        recommendations.append(HEAVY_IMAGES)
    if share(weight.breakdown[Category.SCRIPTS], total) > SCRIPT_SHARE_THRESHOLD:
        recommendations.append(HEAVY_SCRIPTS)
    if not hosting.is_green:
        recommendations.append(NOT_GREEN)
    if track_third_party and share(weight.third_party_bytes, total) > THIRD_PARTY_SHARE_THRESHOLD:
        recommendations.append(HEAVY_THIRD_PARTY)
    if not recommendations:
        recommendations.append(WELL_OPTIMIZED)
    return recommendations

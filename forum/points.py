from __future__ import annotations

from typing import Tuple

from forum.extensions import db
from forum.models import User

# (minimum score, label), highest first
PLAYER_RANKS = (
    (1000.0, "Expert player"),
    (500.0, "Skilled player"),
    (250.0, "Experienced player"),
    (100.0, "Active player"),
    (5.0, "Player"),
    (0.0, "Former player"),
)


def rank_for(score: float) -> str:
    if score <= 0:
        return ""
    for minimum, label in PLAYER_RANKS:
        if score >= minimum:
            return label
    return ""


class PointsService:
    def player_points(self, user_id: int) -> Tuple[float, str]:
        user = db.session.get(User, int(user_id))
        if user is None or user.player_points is None:
            return 0.0, ""

        score = float(user.player_points)
        return score, rank_for(score)

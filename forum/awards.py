from __future__ import annotations

from dataclasses import dataclass
from typing import List

from forum.extensions import db
from forum.models import Award, UserAward


@dataclass(frozen=True)
class AwardAssignmentSummary:
    short_name: str
    description: str
    year: int


class AwardsService:
    """Store-backed award lookup."""

    def for_user(self, user_id: int) -> List[AwardAssignmentSummary]:
        rows = (
            db.session.query(Award.short_name, Award.description, UserAward.year)
            .join(UserAward, UserAward.award_id == Award.id)
            .filter(UserAward.user_id == int(user_id))
            .order_by(UserAward.year.desc(), Award.short_name.asc())
            .all()
        )
        return [
            AwardAssignmentSummary(short_name=short_name, description=description, year=year)
            for short_name, description, year in rows
        ]

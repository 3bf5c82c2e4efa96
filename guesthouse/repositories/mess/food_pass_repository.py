"""
Meal pass repository: batch issuance support, redemption and revocation.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from sqlalchemy import and_, case, not_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guesthouse.core.exceptions import RepositoryError
from guesthouse.models.base.enums import MealType
from guesthouse.models.mess.food_pass import FoodPass
from guesthouse.repositories.base.base_repository import BaseRepository

EntitlementKey = Tuple[str, MealType, date]

# (member names, first day, last day) of passes that must survive a revocation
KeptSpan = Tuple[Sequence[str], date, date]

MEAL_ORDER = case(
    {MealType.BREAKFAST: 0, MealType.LUNCH: 1, MealType.DINNER: 2},
    value=FoodPass.meal_type,
    else_=3,
)


class FoodPassRepository(BaseRepository[FoodPass]):

    def __init__(self, db: Session):
        super().__init__(FoodPass, db)

    def existing_entitlements(
        self,
        user_id: str,
        members: Iterable[str],
        start: date,
        end: date,
    ) -> Set[EntitlementKey]:
        """(member, meal, day) keys that already have a pass, used or not"""
        stmt = select(FoodPass.member_name, FoodPass.meal_type, FoodPass.pass_date).where(
            FoodPass.user_id == user_id,
            FoodPass.member_name.in_(list(members)),
            FoodPass.pass_date >= start,
            FoodPass.pass_date <= end,
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise RepositoryError("Food pass lookup failed") from e
        return {(row[0], MealType(row[1]), row[2]) for row in rows}

    def redeem(self, pass_id: str, used_at: datetime, today: date) -> bool:
        """
        Mark a pass used, only if it is unused and dated today or later.

        Missing, used and expired passes all return False.
        """
        return self.conditional_update(
            pass_id,
            {"is_used": True, "used_at": used_at},
            FoodPass.is_used.is_(False),
            FoodPass.pass_date >= today,
        )

    def delete_unused(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        keep: Iterable[KeptSpan] = (),
    ) -> int:
        conditions = [FoodPass.user_id == user_id, FoodPass.is_used.is_(False)]
        if start is not None:
            conditions.append(FoodPass.pass_date >= start)
        if end is not None:
            conditions.append(FoodPass.pass_date <= end)
        for members, keep_start, keep_end in keep:
            conditions.append(
                not_(
                    and_(
                        FoodPass.member_name.in_(list(members)),
                        FoodPass.pass_date >= keep_start,
                        FoodPass.pass_date <= keep_end,
                    )
                )
            )
        return self.delete_where(*conditions)

    def search(
        self,
        user_id: str,
        pass_date: Optional[date] = None,
        is_used: Optional[bool] = None,
    ) -> List[FoodPass]:
        conditions = [FoodPass.user_id == user_id]
        if pass_date is not None:
            conditions.append(FoodPass.pass_date == pass_date)
        if is_used is not None:
            conditions.append(FoodPass.is_used.is_(is_used))
        return self.find_by_criteria(
            *conditions,
            order_by=[FoodPass.pass_date, MEAL_ORDER, FoodPass.member_name],
        )

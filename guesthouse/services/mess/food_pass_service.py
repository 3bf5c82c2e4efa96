"""
Meal-pass issuer and redeemer.

Issuance is idempotent per (guest, member, meal, day): a pass that
already exists for a key, used or unused, is not created again, so a
failed or interrupted batch can simply be re-run. The unique constraint
on food_passes backs this in the store.

Redemption is a single conditional update; every failure (unknown id,
already used, expired) is reported with the same opaque error.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import ErrorCode
from guesthouse.models.base.enums import MealType
from guesthouse.models.mess.food_pass import FoodPass
from guesthouse.repositories.mess.food_pass_category_repository import FoodPassCategoryRepository
from guesthouse.repositories.mess.food_pass_repository import FoodPassRepository, KeptSpan
from guesthouse.schemas.mess.food_pass import FoodPassUpdate
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.utils.datetime_utils import Clock, DateRangeHelper

PASS_NOT_REDEEMABLE_MESSAGE = "Food pass not found, already used, or expired"


class FoodPassService(BaseService[FoodPassRepository]):
    """
    Issues, redeems, revokes and lists meal passes.
    """

    def __init__(self, db_session: Session, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        super().__init__(FoodPassRepository(db_session), db_session, settings, clock)
        self.category_repository = FoodPassCategoryRepository(db_session)

    # -------------------------------------------------------------------------
    # Issuance
    # -------------------------------------------------------------------------

    def resolve_color(self, dining_hall: str) -> str:
        """Colour of the dining hall's category, else the configured default"""
        if dining_hall:
            category = self.category_repository.find_by_building(dining_hall)
            if category is not None:
                return category.color_code
        return self.settings.DEFAULT_PASS_COLOR

    def issue_batch(
        self,
        user_id: str,
        members: Sequence[str],
        start: date,
        end: date,
        dining_hall: str,
        created_by: str,
        assignment_id: Optional[str] = None,
    ) -> ServiceResult[int]:
        """
        Create one pass per member x meal type x day in [start, end].

        Args:
            user_id: Owning guest
            members: Member names; blanks are ignored, duplicates collapse
            start: First local calendar day
            end: Last local calendar day, inclusive
            dining_hall: Dining hall label, also used to pick the colour
            created_by: Staff member issuing the batch
            assignment_id: Stay the batch belongs to, if any

        Returns:
            ServiceResult with the number of passes created (0 when every
            pass already exists).
        """
        names = list(dict.fromkeys(name.strip() for name in members if name and name.strip()))
        if not names:
            return ServiceResult.validation_failure("At least one member name is required", field="members")
        if end < start:
            return ServiceResult.validation_failure("end date must not be before start date", field="end")

        try:
            color = self.resolve_color(dining_hall)
            existing = self.repository.existing_entitlements(user_id, names, start, end)
            passes: List[FoodPass] = []
            for day in DateRangeHelper.create_date_range(start, end):
                for name in names:
                    for meal in MealType:
                        if (name, meal, day) in existing:
                            continue
                        passes.append(
                            FoodPass(
                                user_id=user_id,
                                member_name=name,
                                meal_type=meal,
                                pass_date=day,
                                dining_hall=dining_hall,
                                color_code=color,
                                is_used=False,
                                created_by=created_by,
                                assignment_id=assignment_id,
                            )
                        )

            with self.transaction():
                self.repository.create_many(passes)

            self._log_operation(
                "issue food passes",
                user_id,
                {
                    "passes_created": len(passes),
                    "passes_skipped": len(existing),
                    "start": start.isoformat(),
                    "end": end.isoformat(),
                    "assignment_id": assignment_id,
                },
            )
            return ServiceResult.success(len(passes), message=f"{len(passes)} food passes generated")
        except Exception as e:
            return self._handle_exception(e, "issue food passes", user_id)

    # -------------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------------

    def redeem(self, pass_id: str) -> ServiceResult[FoodPass]:
        """
        Mark a pass used exactly once.

        Valid only while unused and dated today or later on the local
        calendar.
        """
        try:
            with self.transaction():
                redeemed = self.repository.redeem(pass_id, self.clock.now(), self.clock.today())
            if not redeemed:
                self._logger.info("Food pass redemption rejected", extra={"pass_id": pass_id})
                return ServiceResult.error_result(ErrorCode.PASS_NOT_REDEEMABLE, PASS_NOT_REDEEMABLE_MESSAGE)

            food_pass = self.repository.find_by_id(pass_id, refresh=True)
            self._log_operation("redeem food pass", pass_id, {"user_id": food_pass.user_id})
            return ServiceResult.success(food_pass, message="Food pass scanned successfully")
        except Exception as e:
            return self._handle_exception(e, "redeem food pass", pass_id)

    # -------------------------------------------------------------------------
    # Revocation
    # -------------------------------------------------------------------------

    def revoke_unused(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        keep: Iterable[KeptSpan] = (),
    ) -> ServiceResult[int]:
        """
        Delete the guest's unused passes, optionally only within [start, end].

        Used passes are never touched. Passes of the members named in a
        ``keep`` span, dated inside that span, survive as well.
        """
        keep = list(keep)
        try:
            with self.transaction():
                deleted = self.repository.delete_unused(user_id, start, end, keep)
            self._log_operation(
                "revoke unused food passes",
                user_id,
                {
                    "passes_deleted": deleted,
                    "start": start.isoformat() if start else None,
                    "end": end.isoformat() if end else None,
                    "kept_spans": len(keep),
                },
            )
            return ServiceResult.success(deleted, message=f"{deleted} unused food passes revoked")
        except Exception as e:
            return self._handle_exception(e, "revoke food passes", user_id)

    # -------------------------------------------------------------------------
    # Queries and corrections
    # -------------------------------------------------------------------------

    def list_for(
        self,
        user_id: str,
        pass_date: Optional[date] = None,
        is_used: Optional[bool] = None,
    ) -> ServiceResult[List[FoodPass]]:
        """Passes ordered by date, then meal. Access control is the caller's job."""
        try:
            passes = self.repository.search(user_id, pass_date=pass_date, is_used=is_used)
            return ServiceResult.success(passes, metadata={"count": len(passes)})
        except Exception as e:
            return self._handle_exception(e, "list food passes", user_id)

    def update(self, pass_id: str, patch: FoodPassUpdate) -> ServiceResult[FoodPass]:
        try:
            food_pass = self.repository.find_by_id(pass_id)
            if food_pass is None:
                return ServiceResult.not_found("Food pass", pass_id)
            changes = patch.changes()
            if "color_code" in changes:
                changes["color_code"] = changes["color_code"].upper()
            elif "dining_hall" in changes and changes["dining_hall"] != food_pass.dining_hall:
                changes["color_code"] = self.resolve_color(changes["dining_hall"])
            with self.transaction():
                self.repository.update(food_pass, changes)
            self._log_operation("update food pass", pass_id, {"fields": sorted(changes)})
            return ServiceResult.success(food_pass, message="Food pass updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update food pass", pass_id)

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from mess_feedback.models.feedback import Feedback
from mess_feedback.models.meal import MEAL_TYPES, Meal
from mess_feedback.schemas.feedback import FeedbackRow

LOW_RATING_THRESHOLD = 2
RECENT_LIMIT = 3


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def joined_feedback_query(
    meal_type: Optional[str] = None,
    meal_date: Optional[date] = None,
    rating: Optional[int] = None,
    student_id: Optional[int] = None,
):
    """Feedback joined with its meal; each supplied filter adds one equality predicate."""
    query = select(Feedback, Meal).join(Meal, Feedback.meal_id == Meal.id)
    if meal_type:
        query = query.where(Meal.meal_type == meal_type)
    if meal_date:
        query = query.where(Meal.meal_date == meal_date)
    if rating is not None:
        query = query.where(Feedback.rating == rating)
    if student_id is not None:
        query = query.where(Feedback.student_id == student_id)
    return query.order_by(Feedback.id.desc())


def to_feedback_row(feedback: Feedback, meal: Meal) -> FeedbackRow:
    return FeedbackRow(
        feedback_id=feedback.id,
        meal_id=meal.id,
        student_id=feedback.student_id,
        rating=feedback.rating,
        comments=feedback.comments or "",
        created_at=feedback.created_at,
        meal_name=meal.meal_name,
        meal_type=meal.meal_type,
        meal_date=meal.meal_date,
    )


def _average(ratings: list[int], places: int = 1) -> float:
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), places)


class AnalyticsService:
    def summarize(self, rows: list[FeedbackRow], today: date) -> dict:
        week_ago = today - timedelta(days=7)
        ratings = [r.rating for r in rows]

        by_meal_type = []
        for meal_type in MEAL_TYPES:
            typed = [r.rating for r in rows if r.meal_type == meal_type]
            by_meal_type.append(
                {"meal_type": meal_type, "count": len(typed), "average_rating": _average(typed)}
            )

        recent = sorted(rows, key=lambda r: (r.meal_date, r.feedback_id), reverse=True)[:RECENT_LIMIT]

        return {
            "total_feedback": len(rows),
            "average_rating": _average(ratings),
            "unique_meals": len({r.meal_id for r in rows}),
            "today_feedback": sum(1 for r in rows if r.meal_date == today),
            "this_week_feedback": sum(1 for r in rows if r.meal_date >= week_ago),
            "low_rated_feedback": sum(1 for r in rows if r.rating <= LOW_RATING_THRESHOLD),
            "by_meal_type": by_meal_type,
            "rating_distribution": [
                {"rating": value, "count": ratings.count(value)} for value in range(1, 6)
            ],
            "recent": recent,
        }

    async def get_summary(
        self,
        db: AsyncSession,
        student_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> dict:
        result = await db.execute(joined_feedback_query(student_id=student_id))
        rows = [to_feedback_row(feedback, meal) for feedback, meal in result.all()]
        return self.summarize(rows, today or utc_today())


analytics_service = AnalyticsService()

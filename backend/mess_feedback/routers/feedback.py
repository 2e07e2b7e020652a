import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from mess_feedback.auth import SessionClaims, get_current_user
from mess_feedback.database import get_db
from mess_feedback.exceptions import NotFoundError
from mess_feedback.models.feedback import Feedback
from mess_feedback.models.meal import Meal
from mess_feedback.schemas.feedback import (
    FeedbackAnalytics,
    FeedbackCreate,
    FeedbackResponse,
    FeedbackRow,
    MealStats,
)
from mess_feedback.schemas.meal import MealResponse
from mess_feedback.services.analytics_service import (
    analytics_service,
    joined_feedback_query,
    to_feedback_row,
    utc_today,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# breakfast -> lunch -> dinner -> anything else
MEAL_TYPE_ORDER = case(
    (Meal.meal_type == "breakfast", 1),
    (Meal.meal_type == "lunch", 2),
    (Meal.meal_type == "dinner", 3),
    else_=4,
)


@router.get("", response_model=list[FeedbackRow])
async def list_feedback(
    meal_type: Optional[str] = Query(None, alias="type"),
    meal_date: Optional[date] = Query(None, alias="date"),
    rating: Optional[int] = Query(None),
    student_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    query = joined_feedback_query(
        meal_type=meal_type, meal_date=meal_date, rating=rating, student_id=student_id
    )
    result = await db.execute(query)
    return [to_feedback_row(feedback, meal) for feedback, meal in result.all()]


@router.post("", response_model=FeedbackResponse, status_code=201)
async def submit_feedback(
    data: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    meal = await db.get(Meal, data.meal_id)
    if not meal:
        raise NotFoundError(f"Meal {data.meal_id} not found")

    feedback = Feedback(
        meal_id=data.meal_id,
        student_id=current_user.user_id,
        rating=data.rating,
        comments=data.comments or "",
    )
    db.add(feedback)
    await db.flush()
    await db.refresh(feedback)
    logger.info("User %s rated meal %s: %s", current_user.user_id, data.meal_id, data.rating)

    return FeedbackResponse(
        feedback_id=feedback.id,
        meal_id=feedback.meal_id,
        student_id=feedback.student_id,
        rating=feedback.rating,
        comments=feedback.comments,
        created_at=feedback.created_at,
    )


@router.get("/present", response_model=list[MealResponse])
async def present_meals(
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    """Today's meals, ready for feedback."""
    result = await db.execute(
        select(Meal).where(Meal.meal_date == utc_today()).order_by(MEAL_TYPE_ORDER, Meal.id)
    )
    return [MealResponse.from_model(m) for m in result.scalars().all()]


@router.get("/stats", response_model=list[MealStats])
async def feedback_stats(
    meal_type: Optional[str] = Query(None, alias="type"),
    meal_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    query = (
        select(
            Meal.id,
            Meal.meal_name,
            Meal.meal_type,
            Meal.meal_date,
            func.count(Feedback.id).label("feedback_count"),
            func.avg(Feedback.rating).label("average_rating"),
        )
        .select_from(Meal)
        .outerjoin(Feedback, Feedback.meal_id == Meal.id)
    )
    if meal_type:
        query = query.where(Meal.meal_type == meal_type)
    if meal_date:
        query = query.where(Meal.meal_date == meal_date)

    query = query.group_by(Meal.id, Meal.meal_name, Meal.meal_type, Meal.meal_date).order_by(
        Meal.meal_date.desc(), Meal.id
    )
    result = await db.execute(query)

    return [
        MealStats(
            meal_id=row.id,
            meal_name=row.meal_name,
            meal_type=row.meal_type,
            meal_date=row.meal_date,
            feedback_count=row.feedback_count,
            average_rating=round(float(row.average_rating), 2) if row.average_rating is not None else None,
        )
        for row in result.all()
    ]


@router.get("/analytics", response_model=FeedbackAnalytics)
async def feedback_analytics(
    student_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    return await analytics_service.get_summary(db, student_id=student_id)

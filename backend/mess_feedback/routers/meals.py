import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from mess_feedback.auth import SessionClaims, get_current_user, require_admin
from mess_feedback.database import get_db
from mess_feedback.exceptions import NotFoundError
from mess_feedback.models.feedback import Feedback
from mess_feedback.models.meal import Meal
from mess_feedback.schemas.meal import MealRequest, MealResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_meal_or_404(db: AsyncSession, meal_id: int) -> Meal:
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise NotFoundError("Meal not found")
    return meal


@router.get("", response_model=list[MealResponse])
async def list_meals(
    meal_type: Optional[str] = Query(None, alias="type", description="Filter: breakfast, lunch, dinner"),
    meal_date: Optional[date] = Query(None, alias="date", description="Filter: YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(get_current_user),
):
    query = select(Meal)
    if meal_type:
        query = query.where(Meal.meal_type == meal_type)
    if meal_date:
        query = query.where(Meal.meal_date == meal_date)

    result = await db.execute(query.order_by(Meal.meal_date.desc(), Meal.id))
    return [MealResponse.from_model(m) for m in result.scalars().all()]


@router.post("", response_model=MealResponse, status_code=201)
async def create_meal(
    data: MealRequest,
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(require_admin),
):
    meal = Meal(meal_name=data.meal_name, meal_type=data.type, meal_date=data.meal_date)
    db.add(meal)
    await db.flush()
    await db.refresh(meal)
    logger.info("Admin %s created meal %s", current_user.user_id, meal.id)
    return MealResponse.from_model(meal)


@router.put("/{meal_id}", response_model=MealResponse)
async def update_meal(
    meal_id: int,
    data: MealRequest,
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(require_admin),
):
    meal = await _get_meal_or_404(db, meal_id)
    meal.meal_name = data.meal_name
    meal.meal_type = data.type
    meal.meal_date = data.meal_date

    await db.flush()
    await db.refresh(meal)
    logger.info("Admin %s updated meal %s", current_user.user_id, meal_id)
    return MealResponse.from_model(meal)


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: SessionClaims = Depends(require_admin),
):
    meal = await _get_meal_or_404(db, meal_id)
    # Feedback goes with its meal; ids can be reused by the next insert
    await db.execute(delete(Feedback).where(Feedback.meal_id == meal_id))
    await db.delete(meal)
    await db.flush()
    logger.info("Admin %s deleted meal %s", current_user.user_id, meal_id)
    return {"message": "Meal deleted successfully", "meal_id": meal_id}

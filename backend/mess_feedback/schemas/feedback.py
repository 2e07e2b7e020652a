from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional


class FeedbackCreate(BaseModel):
    meal_id: int
    rating: int = Field(..., ge=1, le=5)
    comments: Optional[str] = ""


class FeedbackResponse(BaseModel):
    feedback_id: int
    meal_id: int
    student_id: int
    rating: int
    comments: str
    created_at: Optional[datetime] = None


class FeedbackRow(FeedbackResponse):
    """A feedback entry joined with its meal."""
    meal_name: str
    meal_type: str
    meal_date: date


class MealStats(BaseModel):
    meal_id: int
    meal_name: str
    meal_type: str
    meal_date: date
    feedback_count: int
    average_rating: Optional[float] = None


class MealTypeSummary(BaseModel):
    meal_type: str
    count: int
    average_rating: float


class RatingBucket(BaseModel):
    rating: int
    count: int


class FeedbackAnalytics(BaseModel):
    total_feedback: int
    average_rating: float
    unique_meals: int
    today_feedback: int
    this_week_feedback: int
    low_rated_feedback: int
    by_meal_type: list[MealTypeSummary]
    rating_distribution: list[RatingBucket]
    recent: list[FeedbackRow]

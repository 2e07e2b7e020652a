from pydantic import BaseModel, Field
from datetime import date
from typing import Literal


class MealRequest(BaseModel):
    meal_name: str = Field(..., min_length=1)
    type: Literal["breakfast", "lunch", "dinner"]
    meal_date: date


class MealResponse(BaseModel):
    meal_id: int
    meal_name: str
    meal_type: str
    meal_date: date

    @classmethod
    def from_model(cls, meal) -> "MealResponse":
        return cls(
            meal_id=meal.id,
            meal_name=meal.meal_name,
            meal_type=meal.meal_type,
            meal_date=meal.meal_date,
        )

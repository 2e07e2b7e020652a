from sqlalchemy import Column, Integer, String, Date
from mess_feedback.database import Base

MEAL_TYPES = ("breakfast", "lunch", "dinner")


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    meal_name = Column(String(200), nullable=False)
    meal_type = Column(String(20), nullable=False, index=True)
    meal_date = Column(Date, nullable=False, index=True)

from mess_feedback.models.user import User, Student, Admin
from mess_feedback.models.meal import Meal
from mess_feedback.models.feedback import Feedback

__all__ = ["User", "Student", "Admin", "Meal", "Feedback"]

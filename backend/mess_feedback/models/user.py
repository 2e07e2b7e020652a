from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from mess_feedback.database import Base

ROLES = ("student", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(200), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # "student" | "admin"
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Student(Base):
    __tablename__ = "students"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    student_name = Column(String(200), nullable=False)
    student_roll = Column(String(50), nullable=False)
    department = Column(String(100))
    room_no = Column(String(20))
    phone_number = Column(String(20))
    email_id = Column(String(200))


class Admin(Base):
    __tablename__ = "admins"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    admin_name = Column(String(200), nullable=False)
    department = Column(String(100))
    level = Column(String(50))

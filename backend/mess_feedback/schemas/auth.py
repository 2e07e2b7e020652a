from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: str = "student"
    # Student profile
    student_roll: Optional[str] = None
    room_no: Optional[str] = None
    phone_number: Optional[str] = None
    # Shared / admin profile
    department: Optional[str] = None
    level: Optional[str] = None


class AccountResponse(BaseModel):
    id: int
    email: str
    role: str
    name: str


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: AccountResponse
    profile: dict = {}

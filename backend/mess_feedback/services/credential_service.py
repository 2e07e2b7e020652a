import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from mess_feedback.auth import SessionClaims, create_token, hash_password, verify_password, verify_session
from mess_feedback.config import Settings
from mess_feedback.exceptions import DuplicateAccount, InvalidCredentials, StorageError, ValidationError
from mess_feedback.models.user import ROLES, Admin, Student, User
from mess_feedback.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def _row_to_dict(row) -> dict:
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class CredentialService:
    """
    Registration, login and session verification.

    Owns no connection of its own: every call opens a session from the
    injected factory and releases it before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], settings: Settings):
        self.session_factory = session_factory
        self.settings = settings
        self._unknown_user_hash: Optional[str] = None

    async def register(self, data: RegisterRequest) -> dict:
        email = _normalize_email(data.email)
        name = (data.name or "").strip()
        if not email or not data.password or not name:
            raise ValidationError("Name, email and password are required")
        if data.role not in ROLES:
            raise ValidationError(f"Invalid role '{data.role}'")
        if data.role == "student" and not (data.student_roll or "").strip():
            raise ValidationError("student_roll is required for students")

        password_hash = hash_password(data.password, self.settings)

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    if await self._email_taken(session, email):
                        raise DuplicateAccount()

                    user = User(email=email, password_hash=password_hash, role=data.role)
                    session.add(user)
                    await session.flush()

                    profile = self._build_profile(user, name, data)
                    session.add(profile)
                    await session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            logger.warning("Registration integrity failure for %s: %s", email, e.orig)
            raise DuplicateAccount()
        except SQLAlchemyError as e:
            logger.exception("Registration failed for %s", email)
            raise StorageError(str(e))

        logger.info("Registered %s account %s", user.role, user.id)
        return {
            "success": True,
            "message": "User registered successfully",
            "token": self._issue_token(user),
            "user": {"id": user.id, "email": user.email, "role": user.role, "name": name},
            "profile": _row_to_dict(profile),
        }

    async def login(self, email: Optional[str], password: Optional[str]) -> dict:
        email = _normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            async with self.session_factory() as session:
                user = await session.scalar(select(User).where(User.email == email))
                # Unknown email and wrong password are indistinguishable to the
                # caller, in both body and hashing cost
                stored_hash = user.password_hash if user is not None else self._dummy_hash()
                if not verify_password(password, stored_hash) or user is None:
                    logger.info("Failed login attempt for %s", email)
                    raise InvalidCredentials()
                profile = await self._load_profile(session, user)
        except SQLAlchemyError as e:
            logger.exception("Login lookup failed for %s", email)
            raise StorageError(str(e))

        return {
            "success": True,
            "message": "Login successful",
            "token": self._issue_token(user),
            "user": {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "name": self._profile_name(user, profile) or "User",
            },
            "profile": profile,
        }

    def verify(self, token: Optional[str]) -> SessionClaims:
        return verify_session(token, self.settings)

    async def ensure_admin(self, email: str, password: str, name: str) -> bool:
        """Create an admin account unless the email is taken. Idempotent."""
        try:
            await self.register(RegisterRequest(email=email, password=password, name=name, role="admin"))
        except DuplicateAccount:
            async with self.session_factory() as session:
                role = await session.scalar(select(User.role).where(User.email == _normalize_email(email)))
            if role != "admin":
                logger.warning("Admin email %s already belongs to a %s account; no admin was created", email, role)
            return False
        return True

    def _issue_token(self, user: User) -> str:
        return create_token(user.id, user.email, user.role, self.settings)

    def _dummy_hash(self) -> str:
        # Same method and cost as real hashes, computed once
        if self._unknown_user_hash is None:
            self._unknown_user_hash = hash_password("unknown-user", self.settings)
        return self._unknown_user_hash

    @staticmethod
    async def _email_taken(session: AsyncSession, email: str) -> bool:
        existing = await session.scalar(select(User.id).where(User.email == email))
        return existing is not None

    @staticmethod
    def _build_profile(user: User, name: str, data: RegisterRequest):
        if user.role == "student":
            return Student(
                user_id=user.id,
                student_name=name,
                student_roll=data.student_roll.strip(),
                department=data.department,
                room_no=data.room_no,
                phone_number=data.phone_number,
                email_id=user.email,
            )
        return Admin(
            user_id=user.id,
            admin_name=name,
            department=data.department,
            level=data.level,
        )

    @staticmethod
    async def _load_profile(session: AsyncSession, user: User) -> dict:
        model = Student if user.role == "student" else Admin
        row = await session.get(model, user.id)
        return _row_to_dict(row) if row is not None else {}

    @staticmethod
    def _profile_name(user: User, profile: dict) -> Optional[str]:
        if user.role == "student":
            return profile.get("student_name")
        return profile.get("admin_name")

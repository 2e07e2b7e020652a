from fastapi import APIRouter, Depends, Request
from mess_feedback.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from mess_feedback.services.credential_service import CredentialService

router = APIRouter()


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credential_service


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    credentials: CredentialService = Depends(get_credential_service),
):
    return await credentials.login(body.email, body.password)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    credentials: CredentialService = Depends(get_credential_service),
):
    """
    Create an account plus its student or admin profile.
    Body: {"email", "password", "name", "role", ...profile fields}
    """
    return await credentials.register(body)

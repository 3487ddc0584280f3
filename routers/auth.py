from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from core.logging_config import logger
from dependencies.auth import get_client, get_current_principal
from models.auth import LoginRequest, TokenResponse
from models.principal import Principal


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate user")
def login(payload: LoginRequest, client: Client = Depends(get_client)):

    email = str(payload.email).strip().lower()

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        # Log the failure type only; never echo auth details back
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password"
        )

    session = getattr(response, "session", None)
    if not session or not session.access_token:
        raise HTTPException(401, "Invalid email or password")

    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
    )


# ============================================================
# CURRENT PRINCIPAL
# ============================================================
@router.get("/me", response_model=Principal, summary="Current authenticated principal")
def read_me(principal: Principal = Depends(get_current_principal)):
    return principal

"""
Authentication routes
Login is answered by the gateway itself and never forwarded
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import structlog

from gateway.models.auth import LoginRequest, LoginResponse
from gateway.services.auth_service import CredentialVerifier
from gateway.utils.dependencies import get_credential_verifier, require_api_key

logger = structlog.get_logger(__name__)

router = APIRouter()


def parse_credentials(payload: Any) -> LoginRequest:
    """Read an email/password pair, anything else counts as empty credentials"""
    try:
        return LoginRequest.model_validate(payload or {})
    except ValidationError:
        return LoginRequest()


@router.post("/login", dependencies=[Depends(require_api_key)])
async def login(
    payload: Any = Body(None),
    verifier: CredentialVerifier = Depends(get_credential_verifier)
):
    """Validate credentials and issue a session token"""
    credentials = parse_credentials(payload)
    user = verifier.verify(credentials.email, credentials.password)
    if user is None:
        logger.warning("Login failed", email=credentials.email)
        return JSONResponse(status_code=401, content={"error": "Invalid email or password"})

    logger.info("Login succeeded", user_id=user.id)
    response = LoginResponse(token=verifier.generate_session_token(), user=user)
    return response.model_dump(by_alias=True)

"""HTTP endpoints for owner signup, login/logout and self-service updates."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from delfood.core.config import get_settings
from delfood.core.rate_limiter import rate_limit_ip
from delfood.domain.owners import (
    AccountDeleted,
    EmptyContent,
    EmptyPassword,
    IdDuplicated,
    LoginSuccess,
    OwnerProfile,
    PasswordDuplicated,
    PasswordMismatch,
    Taken,
    Unauthenticated,
    ValidationFailed,
)
from delfood.services.owner_service import OwnerAccountService
from delfood.services.session_service import clear_session_cookie, session_token, set_session_cookie

router = APIRouter(prefix="/owners", tags=["owners"])


class SignUpRequest(BaseModel):
    id: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    mail: Optional[str] = None
    tel: Optional[str] = None


class LoginRequest(BaseModel):
    id: Optional[str] = None
    password: Optional[str] = None


class UpdateContactRequest(BaseModel):
    password: Optional[str] = None
    mail: Optional[str] = None
    tel: Optional[str] = None


class UpdatePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")


def _service(request: Request) -> OwnerAccountService:
    service = getattr(getattr(request.app, "state", None), "owner_service", None)
    if service is None:
        raise RuntimeError("Owner service not configured")
    return service


def _result(result: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"result": result, **extra}, status_code=status_code)


def _unauthenticated() -> JSONResponse:
    return _result("UNAUTHENTICATED", 401)


def _rate_limit(request: Request, scope: str) -> None:
    settings = get_settings()
    rate_limit_ip(
        request,
        scope,
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
    )


@router.post("/")
def sign_up(request: Request, body: SignUpRequest):
    _rate_limit(request, "owners:signup")
    outcome = _service(request).sign_up(body.model_dump())
    if isinstance(outcome, ValidationFailed):
        return _result("VALIDATION_ERROR", 400, missing=list(outcome.missing_fields))
    if isinstance(outcome, IdDuplicated):
        return _result("ID_DUPLICATED", 409)
    return _result("SUCCESS", 201)


@router.get("/idCheck/{owner_id}")
def id_check(request: Request, owner_id: str):
    outcome = _service(request).check_id_availability(owner_id)
    if isinstance(outcome, Taken):
        return _result("ID_DUPLICATED", 409)
    return _result("SUCCESS", 200)


@router.post("/login")
def login(request: Request, body: LoginRequest):
    _rate_limit(request, "owners:login")
    outcome = _service(request).login(body.id, body.password, session_token(request))
    if isinstance(outcome, AccountDeleted):
        return _result("DELETED", 401)
    if not isinstance(outcome, LoginSuccess):
        return _result("FAIL", 401)
    response = _result("SUCCESS", 200, ownerInfo=outcome.owner.as_dict())
    set_session_cookie(response, outcome.session_token)
    return response


@router.get("/logout")
def logout(request: Request):
    outcome = _service(request).logout(session_token(request))
    if isinstance(outcome, Unauthenticated):
        return _unauthenticated()
    response = _result("SUCCESS", 200)
    clear_session_cookie(response)
    return response


@router.get("/myInfo")
def my_info(request: Request):
    outcome = _service(request).get_own_profile(session_token(request))
    if not isinstance(outcome, OwnerProfile):
        return _unauthenticated()
    return JSONResponse({"ownerInfo": outcome.as_dict()}, status_code=200)


@router.patch("/")
def update_contact(request: Request, body: UpdateContactRequest):
    outcome = _service(request).update_contact(session_token(request), body.mail, body.tel, body.password)
    if isinstance(outcome, Unauthenticated):
        return _unauthenticated()
    if isinstance(outcome, PasswordMismatch):
        return _result("PASSWORD_MISMATCH", 401)
    if isinstance(outcome, EmptyContent):
        return _result("EMPTY_CONTENT", 400)
    return _result("SUCCESS", 200)


@router.patch("/password")
def update_password(request: Request, body: UpdatePasswordRequest):
    outcome = _service(request).update_password(session_token(request), body.password, body.new_password)
    if isinstance(outcome, Unauthenticated):
        return _unauthenticated()
    if isinstance(outcome, EmptyPassword):
        return _result("EMPTY_PASSWORD", 400)
    if isinstance(outcome, PasswordMismatch):
        return _result("PASSWORD_MISMATCH", 401)
    if isinstance(outcome, PasswordDuplicated):
        return _result("PASSWORD_DUPLICATED", 409)
    return _result("SUCCESS", 200)

"""
MODULE_DESCRIPTION: Authentication Endpoints - Register, Login, Logout, Me

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

    POST /auth/register  REGISTER_SCHEMA validation, 409 on duplicate email,
                         201 with user + token, sets the auth cookie
    POST /auth/login     LOGIN_SCHEMA validation, 401 on bad credentials,
                         user + token, sets the auth cookie
    POST /auth/logout    clears the auth cookie
    GET  /auth/me        current user (404 when the account no longer exists)

Tokens are returned in the body for bearer clients and as an http-only cookie
for browsers. Emails are stored lowercased; names and emails are sanitized,
passwords are never altered.
"""

# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.auth.jwt_auth import issue_token
from api.auth.passwords import hash_password, verify_password
from api.config.settings import AUTH_COOKIE_NAME, auth_cookie_secure, get_token_ttl_seconds
from api.dependencies.auth import get_current_user_id
from api.dependencies.store import get_store
from api.helpers import ok_response
from api.models.requests import LoginRequest, RegisterRequest
from api.models.responses import ERROR_RESPONSES, AuthResponse, SuccessEnvelope, UserResponse
from api.utils.debug import print__auth_debug
from editor.result import ApiError, ErrorKind
from editor.validation import LOGIN_SCHEMA, REGISTER_SCHEMA, sanitize_input, validate_form
from persistence.base import SessionStore
from persistence.errors import ConflictError

router = APIRouter(prefix="/auth")

INVALID_CREDENTIALS = "Invalid email or password"


def _set_auth_cookie(response: JSONResponse, token: str) -> None:
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        max_age=get_token_ttl_seconds(),
        httponly=True,
        secure=auth_cookie_secure(),
        samesite="lax",
        path="/",
    )


def _reject_invalid(form_data, schema) -> None:
    result = validate_form(form_data, schema)
    if not result.is_valid:
        print__auth_debug(f"❌ Auth payload rejected: {sorted(result.errors)}")
        raise ApiError.of(ErrorKind.VALIDATION, result.first_error(), result.errors)


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={400: ERROR_RESPONSES[400], 409: {"description": "Email already registered"}},
)
async def register(body: RegisterRequest, store: SessionStore = Depends(get_store)):
    form_data = body.form_data()
    form_data["name"] = sanitize_input(form_data["name"])
    form_data["email"] = sanitize_input(form_data["email"]).lower()
    _reject_invalid(form_data, REGISTER_SCHEMA)

    try:
        user = await store.create_user(
            form_data["name"], form_data["email"], hash_password(form_data["password"])
        )
    except ConflictError as exc:
        print__auth_debug(f"⚠️ Registration conflict for {form_data['email']}")
        raise ApiError.of(
            ErrorKind.CONFLICT,
            "User with this email already exists",
            {"email": "User with this email already exists"},
        ) from exc

    token = issue_token(user.id)
    print__auth_debug(f"✅ Registered user {user.id}")
    response = ok_response(
        {"user": user.to_public(), "token": token},
        message="User registered successfully",
        status_code=201,
    )
    _set_auth_cookie(response, token)
    return response


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]},
)
async def login(body: LoginRequest, store: SessionStore = Depends(get_store)):
    form_data = body.form_data()
    form_data["email"] = sanitize_input(form_data["email"]).lower()
    _reject_invalid(form_data, LOGIN_SCHEMA)

    user = await store.find_user_by_email(form_data["email"])
    if user is None or not verify_password(form_data["password"], user.password_hash):
        print__auth_debug(f"❌ Failed login for {form_data['email']}")
        raise ApiError.of(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

    token = issue_token(user.id)
    print__auth_debug(f"✅ User {user.id} logged in")
    response = ok_response(
        {"user": user.to_public(), "token": token}, message="User logged in successfully"
    )
    _set_auth_cookie(response, token)
    return response


@router.post("/logout", response_model=SuccessEnvelope)
async def logout():
    response = ok_response(message="Logged out successfully")
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return response


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: ERROR_RESPONSES[401], 404: {"description": "User not found"}},
)
async def me(
    user_id: str = Depends(get_current_user_id),
    store: SessionStore = Depends(get_store),
):
    user = await store.find_user_by_id(user_id)
    if user is None:
        raise ApiError.of(ErrorKind.NOT_FOUND, "User not found")
    return ok_response({"user": user.to_public()})

"""
Authentication blueprint:
- POST /auth/signup
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me

The refresh token travels in an HttpOnly, SameSite=Strict cookie and is
never put in a response body. The cookie mirrors the stored token: it is
set whenever a new token is stored and cleared whenever it is revoked.
"""
from __future__ import annotations

from flask import Blueprint, request, g, current_app

from api.errors import error_response, success_response
from models.schemas.user import UserCreateSchema, UserLoginSchema
from services.auth import AuthService
from services.errors import Unauthorized
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()


def auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def set_refresh_cookie(response, token: str):
    max_age = int(auth_service().tokens.refresh_expires.total_seconds())
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        token,
        max_age=max_age,
        httponly=True,
        secure=current_app.config["REFRESH_COOKIE_SECURE"],
        samesite="Strict",
        path="/",
    )
    return response


def clear_refresh_cookie(response):
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        "",
        max_age=0,
        expires=0,
        httponly=True,
        secure=current_app.config["REFRESH_COOKIE_SECURE"],
        samesite="Strict",
        path="/",
    )
    return response


@bp.post("/signup")
def signup():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, name]
          properties:
            email: { type: string }
            password: { type: string, minLength: 8 }
            name: { type: string }
    responses:
      201:
        description: Created (refresh token set as cookie)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})
    result = auth_service().signup(data["email"], data["password"], data["name"])

    response, status = success_response(
        {"user": result.user, "accessToken": result.access_token}, 201
    )
    return set_refresh_cookie(response, result.refresh_token), status


@bp.post("/login")
def login():
    """
    Login: returns an access token and sets the refresh cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Invalid email or password
    """
    data = user_login_schema.load(request.get_json(silent=True) or {})
    result = auth_service().login(data["email"], data["password"])

    response, status = success_response({"user": result.user, "accessToken": result.access_token})
    return set_refresh_cookie(response, result.refresh_token), status


@bp.post("/refresh")
def refresh():
    """
    Rotate the refresh token and mint a new access token.
    The token is read from the refresh cookie; a JSON body field
    `refreshToken` is accepted for older clients.
    ---
    tags:
      - Auth
    responses:
      200:
        description: OK (rotated refresh cookie)
      401:
        description: Missing, invalid, expired or already-rotated refresh token
    """
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    if not token:
        payload = request.get_json(silent=True) or {}
        token = payload.get("refreshToken") if isinstance(payload, dict) else None
    if not token or not isinstance(token, str):
        raise Unauthorized("Refresh token not provided")

    try:
        pair = auth_service().refresh(token)
    except Unauthorized as err:
        # The presented token is dead; drop it from the browser too
        response, status = error_response(err.message, 401)
        return clear_refresh_cookie(response), status

    response, status = success_response({"accessToken": pair.access_token})
    return set_refresh_cookie(response, pair.refresh_token), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the stored refresh token and clears the cookie
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    auth_service().logout(g.current_user_id)
    response, status = success_response(message="Logged out successfully")
    return clear_refresh_cookie(response), status


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: User no longer exists
    """
    user = auth_service().get_current_user(g.current_user_id)
    return success_response({"user": user})

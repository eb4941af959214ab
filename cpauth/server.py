"""FastAPI-powered Chaum-Pedersen authentication service."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .codec import encode_integer, parse_integer
from .errors import InvalidArgument, MalformedInput, NotFound
from .params import resolve_parameters
from .service import AuthService


class RegisterRequest(BaseModel):
    user: str
    y1: str
    y2: str


class RegisterResponse(BaseModel):
    message: str


class AuthenticationChallengeRequest(BaseModel):
    user: str
    r1: str
    r2: str


class AuthenticationChallengeResponse(BaseModel):
    auth_id: str
    c: str


class AuthenticationAnswerRequest(BaseModel):
    auth_id: str
    s: str


class AuthenticationAnswerResponse(BaseModel):
    session_id: str


def _parse(name: str, value: str) -> int:
    try:
        return parse_integer(name, value)
    except MalformedInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def create_app(service: Optional[AuthService] = None) -> FastAPI:
    """Build the application around ``service``.

    Without a service the group parameters are resolved from the environment,
    so a bad parameter file raises before the app is ever served.
    """

    if service is None:
        service = AuthService(resolve_parameters())

    app = FastAPI(title="cpauth", description="Chaum-Pedersen password authentication")
    app.state.service = service

    @app.post("/register", response_model=RegisterResponse)
    async def register(request: RegisterRequest) -> RegisterResponse:
        y1 = _parse("y1", request.y1)
        y2 = _parse("y2", request.y2)
        try:
            message = service.register(request.user, y1, y2)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return RegisterResponse(message=message)

    @app.post("/authentication/challenge", response_model=AuthenticationChallengeResponse)
    async def create_authentication_challenge(
        request: AuthenticationChallengeRequest,
    ) -> AuthenticationChallengeResponse:
        r1 = _parse("r1", request.r1)
        r2 = _parse("r2", request.r2)
        try:
            challenge = service.create_challenge(request.user, r1, r2)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return AuthenticationChallengeResponse(
            auth_id=challenge.auth_id,
            c=encode_integer(challenge.c),
        )

    @app.post("/authentication/verify", response_model=AuthenticationAnswerResponse)
    async def verify_authentication(
        request: AuthenticationAnswerRequest,
    ) -> AuthenticationAnswerResponse:
        s = _parse("s", request.s)
        try:
            result = service.verify(request.auth_id, s)
        except InvalidArgument as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return AuthenticationAnswerResponse(session_id=result.session_id or "")

    return app


__all__ = ["create_app"]

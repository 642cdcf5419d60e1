import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LeaderboardError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(LeaderboardError):
    def __init__(self, errors):
        super().__init__("Invalid payload")
        self.errors = errors


class DuplicateUserError(LeaderboardError):
    def __init__(self, handle: str):
        super().__init__("User already exists")
        self.handle = handle


class MissingParameterError(LeaderboardError):
    def __init__(self, name: str):
        super().__init__(f"{name.capitalize()} is required")
        self.name = name


class AuthenticationError(LeaderboardError):
    status_code = status.HTTP_401_UNAUTHORIZED


class UnknownUserError(AuthenticationError):
    pass


class PasswordMismatchError(AuthenticationError):
    pass


class InvalidTokenError(AuthenticationError):
    pass


# --- Formato de errores de validación ---
def format_validation_errors(errors) -> list:
    """Reduce los errores de pydantic a {loc, msg, type}, sin eco del input."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in errors
    ]


# --- Handlers ---
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await validation_error_handler(request, ValidationError(format_validation_errors(exc.errors())))


async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected %s %s: %d violation(s)", request.method, request.url.path, len(exc.errors))
    return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    # Sin cuerpo: no se revela si falló el usuario, la contraseña o el token
    return Response(status_code=exc.status_code, headers={"WWW-Authenticate": "Bearer"})


async def leaderboard_error_handler(request: Request, exc: LeaderboardError):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(LeaderboardError, leaderboard_error_handler)

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from database import UserStore, get_users
from errors import AuthenticationError, InvalidTokenError
from models import TokenResponse, UserPayload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


# --- JWT ---
class TokenIssuer:
    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: timedelta = timedelta(hours=1)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, handle: str, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        claims = {"sub": handle, "iat": issued_at, "exp": issued_at + self.lifetime}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenError("Invalid token") from exc
        handle = payload.get("sub")
        if not isinstance(handle, str):
            raise InvalidTokenError("Token without subject")
        return handle


def get_tokens(request: Request) -> TokenIssuer:
    return request.app.state.tokens


# --- Usuario actual ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    tokens: Annotated[TokenIssuer, Depends(get_tokens)],
) -> str:
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return tokens.verify(credentials.credentials)


CurrentUser = Annotated[str, Depends(get_current_user)]


# --- Registro ---
@router.post("/signup", status_code=201)
def signup(data: UserPayload, users: Annotated[UserStore, Depends(get_users)]):
    users.register(data.user_handle, data.password)
    return Response(status_code=status.HTTP_201_CREATED)


# --- Login ---
@router.post("/login", response_model=TokenResponse)
def login(
    data: UserPayload,
    users: Annotated[UserStore, Depends(get_users)],
    tokens: Annotated[TokenIssuer, Depends(get_tokens)],
):
    try:
        user = users.verify(data.user_handle, data.password)
    except AuthenticationError:
        logger.info("Login failed for %s", data.user_handle)
        raise
    logger.info("Login successful for %s", user.handle)
    return TokenResponse(jsonWebToken=tokens.issue(user.handle))

from functools import lru_cache
from typing import Annotated, Optional

import bcrypt
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer
from sqlmodel import select

from config import settings
from db import SessionDep
from exceptions import AuthenticationError
from logging_config import get_logger
from models import Colaborador
from schemas import ApiResponse, ColaboradorRead, LoginData, LoginResult

router = APIRouter(tags=["auth"])
logger = get_logger("auth")

INVALID_CREDENTIALS = "Credenciais inválidas"
SESSION_SALT = "colaborador-session"

bearer_scheme = HTTPBearer(auto_error=False)


def _secret_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_secret_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is not a valid bcrypt hash")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("loja-social-dummy-password")


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.SECRET_KEY, salt=SESSION_SALT)


def create_session_token(colaborador_id: int) -> str:
    """
    Signed token carrying the staff id, e.g. {"colaborador_id": 3}.
    Expiry is checked on load against SESSION_MAX_AGE_SECONDS.
    """
    return _serializer().dumps({"colaborador_id": colaborador_id})


def verify_session_token(token: str, max_age_seconds: Optional[int] = None) -> Optional[dict]:
    """
    Returns {'colaborador_id': ...} if valid,
    or None if token is invalid/expired.
    """
    max_age = max_age_seconds if max_age_seconds is not None else settings.SESSION_MAX_AGE_SECONDS
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        logger.log_auth_event("token", success=False, reason="expired")
        return None
    except BadData:
        logger.log_auth_event("token", success=False, reason="bad signature")
        return None

    if not isinstance(data, dict) or not isinstance(data.get("colaborador_id"), int):
        return None
    return data


def authenticate(session: SessionDep, email: str, password: str) -> Colaborador:
    """
    Check an email/password pair against the stored bcrypt hash.
    Unknown email and wrong password raise the same AuthenticationError.
    """
    colaborador = session.exec(
        select(Colaborador).where(Colaborador.email == email)
    ).first()

    if colaborador is None:
        # Same amount of work as a real comparison
        verify_password(password, _dummy_hash())
        logger.log_auth_event("login", success=False, user_email=email, reason="unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not verify_password(password, colaborador.password_hash):
        logger.log_auth_event("login", success=False, user_email=email, reason="wrong password")
        raise AuthenticationError(INVALID_CREDENTIALS)

    logger.log_auth_event("login", success=True, user_email=email)
    return colaborador


def get_current_colaborador(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Colaborador:
    """
    Reads the bearer token, verifies it and loads the staff member.
    Raises 401 if missing / invalid / expired.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Autenticação necessária")

    data = verify_session_token(credentials.credentials)
    if not data:
        raise AuthenticationError("Sessão inválida ou expirada")

    colaborador = session.get(Colaborador, data["colaborador_id"])
    if colaborador is None:
        logger.log_auth_event("token", success=False, reason="staff member no longer exists")
        raise AuthenticationError("Sessão inválida ou expirada")

    return colaborador


CurrentColaboradorDep = Annotated[Colaborador, Depends(get_current_colaborador)]


@router.post("/login", response_model=ApiResponse)
def login(payload: LoginData, session: SessionDep):
    """
    Log in with email + password. Returns the public profile and a bearer token.
    """
    colaborador = authenticate(session, payload.email, payload.password)

    result = LoginResult(
        id=colaborador.id,
        nome=colaborador.nome,
        email=colaborador.email,
        access_token=create_session_token(colaborador.id),
        expires_in=settings.SESSION_MAX_AGE_SECONDS,
    )
    return ApiResponse(message="Login realizado com sucesso", data=result.model_dump())


@router.get("/me", response_model=ApiResponse)
def read_me(current: CurrentColaboradorDep):
    """
    Get the profile of the staff member owning the token.
    """
    return ApiResponse(data=ColaboradorRead.model_validate(current).model_dump())

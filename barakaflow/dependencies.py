from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from barakaflow.config import settings
from barakaflow.database import get_db as db_session
from barakaflow.models.user import User as UserModel
from barakaflow.schemas.user import TokenData
from barakaflow.services.assistant import AssistantService
from barakaflow.services.cache import CacheStore
from barakaflow.services.llm_client import LLMClient
from barakaflow.utils.security import JWTError, decode_access_token

# auto_error=False so a missing header gets the same 401 as a bad token
bearer_scheme = HTTPBearer(auto_error=False)

_assistant_service: AssistantService | None = None

def get_db(db: AsyncSession = Depends(db_session)):
    return db

def credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
):
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise credentials_exception()
    try:
        payload = decode_access_token(credentials.credentials)
        subject = payload.get("sub")
        if subject is None:
            raise credentials_exception()
        token_data = TokenData(user_id=int(subject))
    except (JWTError, ValueError):
        raise credentials_exception()

    result = await db.execute(select(UserModel).filter(UserModel.id == token_data.user_id))
    user = result.scalars().first()
    if user is None:
        raise credentials_exception()
    return user

def get_assistant_service() -> AssistantService:
    # One per process: its cache is the shared suggestion/day/chat store
    global _assistant_service
    if _assistant_service is None:
        _assistant_service = AssistantService(
            llm=LLMClient.from_settings(),
            cache=CacheStore(default_ttl=settings.SUGGESTION_CACHE_TTL_SECONDS),
            suggestion_ttl=settings.SUGGESTION_CACHE_TTL_SECONDS,
            chat_max_tokens=settings.CHAT_MAX_TOKENS,
            tz=settings.tzinfo,
        )
    return _assistant_service

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from barakaflow.dependencies import get_db, get_current_user
from barakaflow.models.user import User as UserModel
from barakaflow.schemas.user import AuthResponse, UserCreate, UserLogin, VerifyResponse
from barakaflow.utils.security import create_user_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(UserModel).filter(UserModel.email == user.email))
    if result.scalars().first():
        raise HTTPException(status_code=400, detail="User with this email already exists")

    new_user = UserModel(
        email=user.email,
        name=user.name,
        hashed_password=get_password_hash(user.password),
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise HTTPException(status_code=400, detail="User with this email already exists")
    await db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return {
        "message": "User registered successfully",
        "token": create_user_token(new_user),
        "user": new_user,
    }

@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(UserModel).filter(UserModel.email == credentials.email))
    user = result.scalars().first()

    # Same answer for unknown email and wrong password
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"message": "Login successful", "token": create_user_token(user), "user": user}

@router.get("/verify", response_model=VerifyResponse)
async def verify(current_user: UserModel = Depends(get_current_user)):
    return {"user": current_user}

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models.user import RegisterResponse, Token, User, UserCreate, UserLogin, UserRole
from ..utils.database import USERS, get_database, parse_object_id, serialize_doc, utc_now
from ..utils.security import (
    TokenPayload,
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid credentials"


def public_profile(user_doc: dict) -> User:
    return User(**serialize_doc(user_doc))


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Register a new user account
    """
    email = user_data.email.lower()
    existing_user = await db[USERS].find_one({"email": email})
    if existing_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user_dict = {
        "name": user_data.name,
        "email": email,
        "password": get_password_hash(user_data.password),
        "role": UserRole.USER.value,
        "created_at": utc_now(),
    }
    try:
        await db[USERS].insert_one(user_dict)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration for the same email
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    except PyMongoError:
        logger.exception("Error creating user")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during registration",
        )

    logger.info("Registered user %s", user_dict["_id"])
    return {"message": "User registered successfully", "user": public_profile(user_dict)}


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Authenticate user and return access token
    """
    user = await db[USERS].find_one({"email": credentials.email.lower()})
    if not user or not verify_password(credentials.password, user["password"]):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS)

    access_token = create_access_token(str(user["_id"]), user["email"], user["role"])
    logger.info("User %s logged in", user["_id"])
    return {"token": access_token, "user": public_profile(user)}


@router.get("/me", response_model=User)
async def read_users_me(
    current_user: TokenPayload = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """
    Get current user information
    """
    user = await db[USERS].find_one({"_id": parse_object_id(current_user.sub)})
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return public_profile(user)

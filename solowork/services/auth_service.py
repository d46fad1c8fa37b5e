"""Authentication service - business logic for user auth."""
import logging
from datetime import datetime

from bson import ObjectId

from solowork.config import settings
from solowork.models.user import User
from solowork.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    async def register_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new user.

        Solowork is a single-user system: once an account exists, further
        registrations are refused unless ALLOW_REGISTRATION is set.

        Args:
            email: User email address
            password: Plain text password
            name: User's name

        Returns:
            User object (without password)

        Raises:
            ValueError: If registration is closed or email is already registered
        """
        if not settings.allow_registration and await self.users.count_documents({}) > 0:
            raise ValueError("Registration is closed")

        existing = await self.users.find_one({"email": email})
        if existing:
            raise ValueError("Email already registered")

        hashed_password = hash_password(password)

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hashed_password,
            "name": name,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        logger.info("Registered user %s", result.inserted_id)

        # Return User object (without hashed_password)
        return User(
            _id=str(result.inserted_id),
            email=email,
            name=name,
            created_at=now,
            updated_at=now,
        )

    async def login(self, email: str, password: str) -> str:
        """
        Login user and return JWT token.

        Args:
            email: User email
            password: Plain text password

        Returns:
            JWT access token

        Raises:
            ValueError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email})
        if not user_doc:
            raise ValueError("Invalid email or password")

        if not verify_password(password, user_doc["hashed_password"]):
            logger.warning("Failed login attempt for %s", email)
            raise ValueError("Invalid email or password")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User object

        Raises:
            ValueError: If user not found
        """
        if not ObjectId.is_valid(user_id):
            raise ValueError("Invalid user ID format")

        user_doc = await self.users.find_one({"_id": ObjectId(user_id)})
        if not user_doc:
            raise ValueError("User not found")

        return User(
            _id=str(user_doc["_id"]),
            email=user_doc["email"],
            name=user_doc["name"],
            created_at=user_doc["created_at"],
            updated_at=user_doc["updated_at"],
        )

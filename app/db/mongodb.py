from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(settings.MONGO_URI)
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")

        # Create indexes for collections
        await create_indexes()

    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def create_indexes():
    """Create indexes for collections."""
    try:
        # Users collection indexes
        await db.db.users.create_index("email", unique=True)

        # Stylists collection indexes
        await db.db.stylists.create_index("userId", unique=True)

        # One weekly entry per stylist and weekday
        await db.db.availability_schedules.create_index(
            [("stylistId", ASCENDING), ("dayOfWeek", ASCENDING)],
            unique=True
        )

        # One exception per stylist and date (upserted by date)
        await db.db.availability_exceptions.create_index(
            [("stylistId", ASCENDING), ("date", ASCENDING)],
            unique=True
        )

        # Bookings collection indexes
        await db.db.bookings.create_index("clientId")
        await db.db.bookings.create_index([("stylistId", ASCENDING), ("appointmentDate", ASCENDING)])

        # Forum collections
        await db.db.forum_posts.create_index([("updatedAt", DESCENDING)])
        await db.db.comments.create_index(
            [("postId", ASCENDING), ("parentId", ASCENDING), ("createdAt", ASCENDING)]
        )
        await db.db.likes.create_index(
            [("userId", ASCENDING), ("targetType", ASCENDING), ("targetId", ASCENDING)],
            unique=True
        )
        await db.db.likes.create_index([("targetType", ASCENDING), ("targetId", ASCENDING)])

        # Notifications collection indexes
        await db.db.notifications.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])

        logger.info("MongoDB indexes created successfully.")
    except Exception as e:
        logger.error(f"Failed to create MongoDB indexes: {e}")

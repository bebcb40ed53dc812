from fastapi import APIRouter
from app.api.api_v1.endpoints import auth, stylists, availability, calendar, bookings, forum, comments, notifications

router = APIRouter()

# Include all routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(stylists.router, prefix="/stylists", tags=["Stylists"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(forum.router, prefix="/forum", tags=["Forum"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])

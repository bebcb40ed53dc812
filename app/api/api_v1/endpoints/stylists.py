from fastapi import APIRouter, Depends, HTTPException, status
from app.core.auth import require_role
from app.schemas.stylist import StylistCreate, StylistResponse
from app.services.stylist_service import (
    create_stylist, get_stylist_by_id, get_stylist_by_user_id
)

router = APIRouter()

@router.post("/", response_model=StylistResponse, status_code=status.HTTP_201_CREATED)
async def create_stylist_profile(
    stylist_in: StylistCreate,
    current_user: dict = Depends(require_role("STYLIST"))
):
    """
    Create the stylist profile (and its services) for the current user
    """
    # Check if stylist profile already exists
    existing_stylist = await get_stylist_by_user_id(current_user["id"])
    if existing_stylist:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Stylist profile already exists for this user"
        )

    stylist = await create_stylist(stylist_in, current_user["id"])
    return stylist

@router.get("/me", response_model=StylistResponse)
async def get_my_stylist_profile(current_user: dict = Depends(require_role("STYLIST"))):
    """
    Get the stylist profile of the current user
    """
    stylist = await get_stylist_by_user_id(current_user["id"])
    if not stylist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist profile not found"
        )
    return stylist

@router.get("/{stylist_id}", response_model=StylistResponse)
async def get_stylist(stylist_id: str):
    """
    Get a stylist profile by ID
    """
    stylist = await get_stylist_by_id(stylist_id)
    if not stylist:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stylist not found"
        )
    return stylist

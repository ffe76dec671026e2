"""
Pricing Profile API - FastAPI router for profile management.
"""
from fastapi import APIRouter, Depends

from .responses import success
from .schemas import ProfileIn
from .state import PricingServices, get_services

router = APIRouter(prefix="/api/pricing-profile", tags=["pricing-profile"])


@router.post("", status_code=201)
async def create_profile(body: ProfileIn, services: PricingServices = Depends(get_services)):
    """Create a new pricing profile."""
    profile = services.profiles.create(body.model_dump())
    return success(profile.to_dict())


@router.get("")
async def list_profiles(services: PricingServices = Depends(get_services)):
    """List all profiles with their adjustments."""
    return success([detail.to_dict() for detail in services.profiles.list_profiles()])


@router.get("/{profile_id}")
async def get_profile(profile_id: str, services: PricingServices = Depends(get_services)):
    """Get a single profile with its adjustments."""
    return success(services.profiles.get(profile_id).to_dict())


@router.put("/{profile_id}")
async def update_profile(profile_id: str, body: ProfileIn, services: PricingServices = Depends(get_services)):
    """Update an existing profile. Stored adjustments are not recomputed."""
    profile = services.profiles.update(profile_id, body.model_dump())
    return success(profile.to_dict())


@router.delete("/{profile_id}")
async def delete_profile(profile_id: str, services: PricingServices = Depends(get_services)):
    """Delete a profile and all of its adjustments."""
    services.profiles.delete(profile_id)
    return success()

"""
Admin session endpoints.
"""

from fastapi import APIRouter, Depends, status

from gameportal.auth import TokenValidator, get_token_validator, require_admin
from gameportal.models import Admin
from gameportal.schemas import AdminResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/me", response_model=AdminResponse)
async def get_current_admin(admin: Admin = Depends(require_admin)):
    """Return the admin owning the presented token."""
    return admin


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    admin: Admin = Depends(require_admin),
    validator: TokenValidator = Depends(get_token_validator),
):
    """Invalidate the presented token."""
    await validator.revoke(admin.id)

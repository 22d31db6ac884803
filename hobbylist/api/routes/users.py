# hobbylist/api/routes/users.py
from fastapi import APIRouter, Depends

from hobbylist.api.deps import get_current_user, CurrentUser
from hobbylist.schemas.auth import UserOut

router = APIRouter(tags=["Users"])

@router.get("/me", response_model=UserOut)
def me(user: CurrentUser = Depends(get_current_user)):
    """Return the user behind the Bearer token."""
    return UserOut(id=user.id, email=user.email, role=user.role, is_active=user.is_active)

# salon/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from salon.auth import authenticate_admin, create_access_token, get_current_admin
from salon.schemas import Token

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    if not authenticate_admin(form_data.username, form_data.password):
        logger.warning(f"Failed admin login for {form_data.username!r}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": form_data.username, "role": "admin"})
    return {"access_token": token, "token_type": "bearer"}


@router.get("/check-auth")
def check_auth(admin: dict = Depends(get_current_admin)):
    return {"authenticated": True, "username": admin["username"]}

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from ..errors import TaskboardError
from ..repositories import UserRepository, get_user_repository
from ..schemas import UserCreate
from ..utils import read_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])


# PUBLIC_INTERFACE
@router.post(
    "/register",
    summary="Register user",
    description=(
        "Create a user from the submitted form (or JSON) fields name, lastName, phone, "
        "email and password, then redirect to the dashboard."
    ),
    responses={
        302: {"description": "User created, redirect to /dashboard"},
        500: {"description": "Registration failed"},
    },
)
def register(
    payload: Dict[str, Any] = Depends(read_payload),
    users: UserRepository = Depends(get_user_repository),
) -> Response:
    """
    Register a new user. Any repository failure answers 500 with
    {"error": "Registration failed"}.
    """
    try:
        user = users.create(UserCreate.model_validate(payload))
    except (TaskboardError, ValidationError) as exc:
        logger.error("Registration error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Registration failed"},
        )
    logger.info("User created: id=%s email=%s", user["id"], user.get("email"))
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)

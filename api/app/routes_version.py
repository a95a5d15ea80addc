from __future__ import annotations

import os

from fastapi import APIRouter, Request

router = APIRouter()

VALID_ENVS = {"prod", "staging", "dev"}


@router.get("/version")
async def version(request: Request) -> dict:
    env = request.app.state.settings.app_env
    if env not in VALID_ENVS:
        env = "dev"
    return {
        "sha": os.getenv("GIT_SHA", "unknown"),
        "built_at": os.getenv("BUILT_AT", "unknown"),
        "env": env,
    }

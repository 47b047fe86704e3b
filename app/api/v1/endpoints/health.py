"""
Health Endpoint Module

Liveness probe for load balancers. It does not touch the registry or any
per-database store, so it stays green while storage is degraded.
"""
from typing import Dict
from fastapi import APIRouter

router = APIRouter()


@router.get("", response_model=Dict[str, str])
def health() -> Dict[str, str]:
    return {"status": "ok"}

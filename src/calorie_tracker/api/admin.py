"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from calorie_tracker.api.models import SeedFoodsRequest  # noqa: TC001

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/foods/seed", dependencies=[Depends(require_admin)])
async def seed_foods(payload: SeedFoodsRequest, request: Request) -> dict[str, object]:
    """Replace the food catalog with the posted records."""
    container: AppContainer = request.app.state.container
    records = [food.model_dump(exclude_none=True) for food in payload.foods]
    count = container.food_catalog_service.replace_catalog(records)
    return {"success": True, "imported": count}

from typing import Any

from fastapi import APIRouter, Depends

from cvbuilder.dependencies import require_admin
from cvbuilder.schemas.admin import PricingUpdateRequest
from cvbuilder.services import admin_service
from cvbuilder.services.cv_service import current_pricing

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/admin/stats")
def admin_stats():
    return admin_service.dashboard_stats()


@router.get("/admin/pricing")
def admin_pricing():
    return {"pricing": current_pricing()}


@router.put("/admin/pricing")
def admin_update_pricing(payload: PricingUpdateRequest, admin: dict[str, Any] = Depends(require_admin)):
    return admin_service.update_pricing(admin["id"], payload.additional_cv_price)

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.core.exceptions import NotFoundError
from storefront.database.connection import get_db
from storefront.dependencies.auth import require_admin
from storefront.schemas.pricing import PricingResponse, PricingUpdate, PricingUpdateResponse
from storefront.services.pricing.pricing_service import get_pricing_config, update_pricing


router = APIRouter(prefix="/pricing", tags=["Pricing"])

@router.get("/", response_model=PricingResponse)
def read_pricing(db: Session = Depends(get_db)):
    config = get_pricing_config(db)
    if not config:
        raise NotFoundError("Pricing")
    return config

@router.put("/", response_model=PricingUpdateResponse, dependencies=[Depends(require_admin)])
def put_pricing(data: PricingUpdate, db: Session = Depends(get_db)):
    result = update_pricing(db, data)
    return {
        "message": "Pricing updated successfully and ornaments recalculated by purity",
        "pricing": result["pricing"],
        "recalculation": {"updated": result["updated"], "skipped": result["skipped"]},
    }

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.database.connection import get_db
from storefront.dependencies.auth import require_auth
from storefront.models.user import User
from storefront.schemas.cart import (
    CartAddRequest,
    CartResponse,
    CartUpdateRequest,
    GuestCartAddRequest,
    GuestCartResponse,
)
from storefront.services.cart_service import (
    add_to_guest_cart,
    add_to_user_cart,
    get_guest_cart,
    get_user_cart,
    init_guest_cart,
    remove_from_guest_cart,
    remove_from_user_cart,
    update_user_cart_item,
)


router = APIRouter(prefix="/cart", tags=["Cart"])

# GUEST
@router.post("/guest/init", response_model=GuestCartResponse, status_code=201)
def guest_init(db: Session = Depends(get_db)):
    cart = init_guest_cart(db)
    return {"guest_id": cart.guest_id, "cart": cart}

@router.post("/guest/add", response_model=GuestCartResponse)
def guest_add(data: GuestCartAddRequest, db: Session = Depends(get_db)):
    cart = add_to_guest_cart(db, data.guest_id, data.ornament_id, data.quantity)
    return {"guest_id": cart.guest_id, "message": "Added to guest cart", "cart": cart}

@router.get("/guest/{guest_id}", response_model=CartResponse)
def guest_get(guest_id: str, db: Session = Depends(get_db)):
    return get_guest_cart(db, guest_id) or CartResponse(guest_id=guest_id)

@router.delete("/guest/{guest_id}/items/{ornament_id}", response_model=CartResponse)
def guest_remove(guest_id: str, ornament_id: int, db: Session = Depends(get_db)):
    return remove_from_guest_cart(db, guest_id, ornament_id)

# USER
@router.get("/user", response_model=CartResponse)
def user_get(user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return get_user_cart(db, user.id) or CartResponse(user_id=user.id)

@router.post("/user/add", response_model=CartResponse)
def user_add(data: CartAddRequest, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return add_to_user_cart(db, user.id, data.ornament_id, data.quantity)

@router.put("/user/update", response_model=CartResponse)
def user_update(data: CartUpdateRequest, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return update_user_cart_item(db, user.id, data.ornament_id, data.quantity)

@router.delete("/user/items/{ornament_id}", response_model=CartResponse)
def user_remove(ornament_id: int, user: User = Depends(require_auth), db: Session = Depends(get_db)):
    return remove_from_user_cart(db, user.id, ornament_id)

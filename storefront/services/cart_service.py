import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from storefront.core.exceptions import NotFoundError
from storefront.models.cart import Cart, CartItem
from storefront.services.ornament_service import get_ornament

logger = logging.getLogger(__name__)


def _find_item(cart: Cart, ornament_id: int) -> Optional[CartItem]:
    for item in cart.items:
        if item.ornament_id == ornament_id:
            return item
    return None


def _add_item(cart: Cart, ornament_id: int, quantity: int):
    existing = _find_item(cart, ornament_id)
    if existing:
        existing.quantity += quantity
    else:
        cart.items.append(CartItem(ornament_id=ornament_id, quantity=quantity))


def _remove_item(db: Session, cart: Cart, ornament_id: int) -> Cart:
    item = _find_item(cart, ornament_id)
    if item:
        cart.items.remove(item)
    db.commit()
    db.refresh(cart)
    return cart


# --------------------------
# GUEST CART
# --------------------------
def get_guest_cart(db: Session, guest_id: str) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.guest_id == guest_id).first()


def init_guest_cart(db: Session) -> Cart:
    cart = Cart(guest_id=str(uuid.uuid4()))
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return cart


def add_to_guest_cart(db: Session, guest_id: Optional[str], ornament_id: int, quantity: int = 1) -> Cart:
    """Add to the guest cart, creating the cart (and a guest id) when needed."""
    get_ornament(db, ornament_id)

    guest_id = guest_id or str(uuid.uuid4())
    cart = get_guest_cart(db, guest_id)
    if not cart:
        cart = Cart(guest_id=guest_id)
        db.add(cart)

    _add_item(cart, ornament_id, quantity)
    db.commit()
    db.refresh(cart)
    return cart


def remove_from_guest_cart(db: Session, guest_id: str, ornament_id: int) -> Cart:
    cart = get_guest_cart(db, guest_id)
    if not cart:
        raise NotFoundError("Cart", guest_id)
    return _remove_item(db, cart, ornament_id)


# --------------------------
# USER CART
# --------------------------
def get_user_cart(db: Session, user_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.user_id == user_id).first()


def add_to_user_cart(db: Session, user_id: int, ornament_id: int, quantity: int = 1) -> Cart:
    get_ornament(db, ornament_id)

    cart = get_user_cart(db, user_id)
    if not cart:
        cart = Cart(user_id=user_id)
        db.add(cart)

    _add_item(cart, ornament_id, quantity)
    db.commit()
    db.refresh(cart)
    return cart


def update_user_cart_item(db: Session, user_id: int, ornament_id: int, quantity: int) -> Cart:
    cart = get_user_cart(db, user_id)
    if not cart:
        raise NotFoundError("Cart", user_id)

    item = _find_item(cart, ornament_id)
    if not item:
        raise NotFoundError("Cart item", ornament_id)

    item.quantity = quantity
    db.commit()
    db.refresh(cart)
    return cart


def remove_from_user_cart(db: Session, user_id: int, ornament_id: int) -> Cart:
    cart = get_user_cart(db, user_id)
    if not cart:
        raise NotFoundError("Cart", user_id)
    return _remove_item(db, cart, ornament_id)


# --------------------------
# MERGE ON LOGIN
# --------------------------
def merge_guest_cart_into_user(db: Session, guest_id: Optional[str], user_id: int) -> Optional[Cart]:
    """Fold the guest cart's items into the user's cart and delete the guest cart.

    Quantities of ornaments present in both carts are summed. Returns the user
    cart, or None when there was nothing to merge.
    """
    if not guest_id:
        return None
    guest_cart = get_guest_cart(db, guest_id)
    if not guest_cart or not guest_cart.items:
        return None

    user_cart = get_user_cart(db, user_id)
    if not user_cart:
        user_cart = Cart(user_id=user_id)
        db.add(user_cart)

    for guest_item in guest_cart.items:
        _add_item(user_cart, guest_item.ornament_id, guest_item.quantity)

    db.delete(guest_cart)
    db.commit()
    db.refresh(user_cart)
    logger.info("Merged guest cart %s into cart of user %s", guest_id, user_id)
    return user_cart

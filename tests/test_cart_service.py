import pytest

from storefront.core.exceptions import NotFoundError
from storefront.models.cart import Cart
from storefront.models.user import User
from storefront.services.cart_service import (
    add_to_guest_cart,
    add_to_user_cart,
    get_guest_cart,
    get_user_cart,
    init_guest_cart,
    merge_guest_cart_into_user,
    remove_from_guest_cart,
    remove_from_user_cart,
    update_user_cart_item,
)


@pytest.fixture()
def shopper(db):
    user = User(username="shopper", email="shopper@example.com", hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _quantities(cart):
    return {item.ornament_id: item.quantity for item in cart.items}


def test_init_guest_cart_issues_guest_id(db):
    cart = init_guest_cart(db)
    assert cart.guest_id
    assert cart.items == []
    assert get_guest_cart(db, cart.guest_id).id == cart.id


def test_guest_add_creates_cart_and_increments(db, make_ornament):
    ring = make_ornament()

    cart = add_to_guest_cart(db, None, ring.id, 2)
    guest_id = cart.guest_id
    assert guest_id

    cart = add_to_guest_cart(db, guest_id, ring.id, 3)
    assert cart.guest_id == guest_id
    assert _quantities(cart) == {ring.id: 5}


def test_guest_add_unknown_ornament(db):
    with pytest.raises(NotFoundError):
        add_to_guest_cart(db, "guest-1", 999, 1)


def test_guest_remove(db, make_ornament):
    ring, chain = make_ornament(), make_ornament(category="Chains")
    cart = add_to_guest_cart(db, "guest-2", ring.id)
    add_to_guest_cart(db, "guest-2", chain.id)

    cart = remove_from_guest_cart(db, "guest-2", ring.id)
    assert _quantities(cart) == {chain.id: 1}

    with pytest.raises(NotFoundError):
        remove_from_guest_cart(db, "no-such-guest", ring.id)


def test_user_cart_add_update_remove(db, shopper, make_ornament):
    ring = make_ornament()

    cart = add_to_user_cart(db, shopper.id, ring.id)
    cart = add_to_user_cart(db, shopper.id, ring.id, 2)
    assert _quantities(cart) == {ring.id: 3}

    cart = update_user_cart_item(db, shopper.id, ring.id, 7)
    assert _quantities(cart) == {ring.id: 7}

    with pytest.raises(NotFoundError):
        update_user_cart_item(db, shopper.id, 12345, 1)

    cart = remove_from_user_cart(db, shopper.id, ring.id)
    assert cart.items == []


def test_user_cart_missing(db, shopper):
    assert get_user_cart(db, shopper.id) is None
    with pytest.raises(NotFoundError):
        update_user_cart_item(db, shopper.id, 1, 1)


def test_merge_sums_quantities_and_deletes_guest_cart(db, shopper, make_ornament):
    ring, chain = make_ornament(), make_ornament(category="Chains")
    add_to_user_cart(db, shopper.id, ring.id, 1)
    add_to_guest_cart(db, "guest-3", ring.id, 2)
    add_to_guest_cart(db, "guest-3", chain.id, 4)

    merged = merge_guest_cart_into_user(db, "guest-3", shopper.id)

    assert _quantities(merged) == {ring.id: 3, chain.id: 4}
    assert get_guest_cart(db, "guest-3") is None
    assert db.query(Cart).count() == 1


def test_merge_without_guest_cart_is_noop(db, shopper):
    assert merge_guest_cart_into_user(db, None, shopper.id) is None
    assert merge_guest_cart_into_user(db, "unknown", shopper.id) is None
    assert get_user_cart(db, shopper.id) is None

from enum import Enum

class TrackingEvent(str, Enum):
    visit = "visit"
    view_product = "view_product"
    add_to_cart = "add_to_cart"
    remove_from_cart = "remove_from_cart"
    wishlist_add = "wishlist_add"
    wishlist_remove = "wishlist_remove"
    checkout = "checkout"
    purchase = "purchase"
    share = "share"
    drop_hint = "drop_hint"


class Platform(str, Enum):
    web = "web"
    mobile = "mobile"
    api = "api"

from enum import Enum

class CategoryType(str, Enum):
    gold = "Gold"
    diamond = "Diamond"
    gemstone = "Gemstone"
    fashion = "Fashion"


class Gender(str, Enum):
    men = "Men"
    women = "Women"
    unisex = "Unisex"


class SortOption(str, Enum):
    price_asc = "price_asc"
    price_desc = "price_desc"
    newest = "newest"
    oldest = "oldest"
    featured = "featured"

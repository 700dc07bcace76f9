from enum import Enum


class Category(str, Enum):
    TEXTBOOKS = "Textbooks"
    ELECTRONICS = "Electronics"
    FURNITURE = "Furniture"
    CLOTHING = "Clothing"
    STATIONERY = "Stationery"
    SPORTS = "Sports"
    OTHER = "Other"


class Condition(str, Enum):
    NEW = "New"
    LIKE_NEW = "Like New"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class ContactMethod(str, Enum):
    """How buyers reach the seller."""

    IN_APP = "in-app"
    PHONE = "phone"

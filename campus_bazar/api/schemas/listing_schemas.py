from datetime import datetime

from pydantic import BaseModel


class SellerResponse(BaseModel):
    id: str
    name: str
    university: str


class ListingResponse(BaseModel):
    id: str
    title: str
    description: str
    price: float
    category: str
    condition: str
    images: list[str]
    contact_method: str
    phone: str | None = None
    location: str
    seller: SellerResponse
    status: str
    posted_date: datetime

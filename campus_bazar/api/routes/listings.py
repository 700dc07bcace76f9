from fastapi import APIRouter, Depends, HTTPException, status

from campus_bazar.api.dependencies import get_listing_endpoint
from campus_bazar.api.schemas.listing_schemas import ListingResponse
from campus_bazar.infrastructure.listings.in_memory_listing_endpoint import (
    InMemoryListingEndpoint,
)

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: str,
    endpoint: InMemoryListingEndpoint = Depends(get_listing_endpoint),
) -> ListingResponse:
    listing = endpoint.get(listing_id)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listing not found.")
    return ListingResponse.model_validate(listing.to_dict())

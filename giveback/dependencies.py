from fastapi import Request

from giveback.services.listing_store import ListingStore


def get_listing_store(request: Request) -> ListingStore:
    return request.app.state.listing_store

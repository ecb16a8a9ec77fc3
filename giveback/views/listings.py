from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from giveback.database import get_session
from giveback.schemas.listing import ListingCreate, SearchResult
from giveback.viewmodels.listing_vm import ListingViewModel

router = APIRouter(prefix="/listings")


@router.post("/")
async def create_listing(request: Request, session: AsyncSession = Depends(get_session)):
    form = await request.form()
    fields = {k: v for k, v in form.items() if v != "" and k not in ("photos", "tags")}
    fields["photos"] = [p for p in form.getlist("photos") if p]
    fields["tags"] = [t.strip() for t in form.getlist("tags") if t.strip()]
    try:
        data = ListingCreate(**fields)
    except ValidationError as exc:
        return HTMLResponse(str(exc), status_code=400)

    listing = await ListingViewModel.create_listing(session, data)
    return RedirectResponse(f"/listings/{listing.id}", status_code=303)


@router.get("/saved")
async def saved_listings(user_id: str, session: AsyncSession = Depends(get_session)):
    listings = await ListingViewModel.saved_for(session, user_id)
    return JSONResponse([SearchResult.model_validate(row).model_dump(mode="json") for row in listings])


@router.get("/mine")
async def my_listings(user_id: str, session: AsyncSession = Depends(get_session)):
    listings = await ListingViewModel.listed_by(session, user_id)
    return JSONResponse([SearchResult.model_validate(row).model_dump(mode="json") for row in listings])


@router.get("/{listing_id}")
async def listing_detail(listing_id: str, session: AsyncSession = Depends(get_session)):
    vm = await ListingViewModel.load(session, listing_id)
    if not vm.listing:
        return HTMLResponse("Listing not found", status_code=404)
    return JSONResponse(vm.listing.model_dump(mode="json"))


@router.post("/{listing_id}/save")
async def save_listing(listing_id: str, request: Request, session: AsyncSession = Depends(get_session)):
    form = await request.form()
    user_id = form.get("user_id", "").strip()
    if not user_id:
        return HTMLResponse("user_id is required", status_code=400)
    if not await ListingViewModel.save(session, user_id, listing_id):
        return HTMLResponse("Listing not found", status_code=404)
    return HTMLResponse(status_code=204)


@router.delete("/{listing_id}/save")
async def unsave_listing(listing_id: str, user_id: str, session: AsyncSession = Depends(get_session)):
    removed = await ListingViewModel.unsave(session, user_id, listing_id)
    return HTMLResponse(status_code=204 if removed else 404)

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from giveback.config import settings
from giveback.dependencies import get_listing_store
from giveback.schemas.listing import Category, Condition
from giveback.schemas.search import PriceRange, QueryState, SortMode, ViewMode
from giveback.services.listing_store import ListingStore
from giveback.services.navigation import UrlNavigator
from giveback.viewmodels.search_vm import Failed, SearchViewModel

router = APIRouter(prefix="/search")


def _render(request: Request, vm: SearchViewModel, template: str):
    return request.app.state.templates.TemplateResponse(
        template,
        {
            "request": request,
            "vm": vm,
            "categories": list(Category),
            "conditions": list(Condition),
            "sort_modes": list(SortMode),
        },
    )


@router.get("/")
async def search_page(
    request: Request,
    q: str = "",
    store: ListingStore = Depends(get_listing_store),
):
    vm = SearchViewModel(store, UrlNavigator(str(request.url)), QueryState(query=q))
    if q:
        await vm.refresh()
    return _render(request, vm, "search/results.html")


@router.get("/results")
async def search_results(
    request: Request,
    q: str = "",
    page: int = Query(default=1, ge=1),
    category: list[Category] = Query(default=[]),
    condition: list[Condition] = Query(default=[]),
    min_price: int = 0,
    max_price: int = settings.default_price_max,
    sort: SortMode = SortMode.NEWEST,
    view: ViewMode = ViewMode.GRID,
    store: ListingStore = Depends(get_listing_store),
):
    """HTMX partial: results for the full filter state, without the page chrome.

    Answers 204 when there is nothing new to show (empty query, failed fetch)
    so that HTMX leaves the results already on screen in place.
    """
    if not q:
        return Response(status_code=204)
    try:
        price_range = PriceRange(min_price, max_price)
    except ValueError as exc:
        return HTMLResponse(str(exc), status_code=400)

    state = QueryState(
        query=q,
        page=page,
        categories=frozenset(category),
        conditions=frozenset(condition),
        price_range=price_range,
        sort=sort,
    )
    navigator = UrlNavigator("/search/")
    vm = SearchViewModel(store, navigator, state)
    vm.set_view_mode(view)
    await vm.refresh()
    if isinstance(vm.fetch_state, Failed) and not vm.fetch_state.timed_out:
        return Response(status_code=204)

    # only the query text goes into the address bar
    navigator.set_params(q=q)
    resp = _render(request, vm, "search/_results.html")
    resp.headers["HX-Push-Url"] = navigator.url
    return resp


@router.get("/suggestions")
async def search_suggestions(q: str = "", store: ListingStore = Depends(get_listing_store)):
    vm = SearchViewModel(store, UrlNavigator())
    suggestions = await vm.suggest(q)
    return JSONResponse({"suggestions": suggestions})

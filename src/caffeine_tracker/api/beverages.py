"""Beverage search and barcode lookup endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from caffeine_tracker.api.auth import require_api_token
from caffeine_tracker.services.products import ProductNotFoundError

if TYPE_CHECKING:
    from caffeine_tracker.containers import AppContainer

router = APIRouter(
    prefix="/beverages",
    tags=["beverages"],
    dependencies=[Depends(require_api_token)],
)


@router.get("/catalog")
async def search_catalog(
    request: Request, q: str = "", limit: int = 20
) -> dict[str, object]:
    """Search the local caffeine catalog."""
    container: AppContainer = request.app.state.container
    return {
        "beverages": [asdict(b) for b in container.beverage_catalog.search(q, limit)]
    }


@router.get("/search")
async def search_products(
    request: Request, q: str, limit: int = 10
) -> dict[str, object]:
    """Search Nutritionix for caffeinated products."""
    container: AppContainer = request.app.state.container
    try:
        products = await container.product_service.search(q, limit=limit)
    except httpx.HTTPError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Product search failed"
        ) from exc
    return {"products": [asdict(p) for p in products]}


@router.get("/barcode/{upc}")
async def lookup_barcode(upc: str, request: Request) -> dict[str, object]:
    """Resolve a scanned barcode to a product with caffeine content."""
    container: AppContainer = request.app.state.container
    try:
        product = await container.product_service.lookup_barcode(upc)
    except ProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Barcode lookup failed"
        ) from exc
    return {"product": asdict(product)}

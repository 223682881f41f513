# pos_api/routers/products.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.schemas.common import ApiResponse
from pos_api.schemas.product import ProductResponse
from pos_api.services.catalog_service import MAX_PAGE_SIZE, SEARCH_LIMIT, CatalogService

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


@router.get("", response_model=ApiResponse[List[ProductResponse]])
def list_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    products, total = CatalogService(db).list_products(page, page_size, search)

    return ApiResponse[List[ProductResponse]](
        message=f"Retrieved {len(products)} products",
        data=products,
        total_count=total,
    )


# Declared before /{product_id} so "search" and "categories" aren't read as ids
@router.get("/search", response_model=ApiResponse[List[ProductResponse]])
def search_products(
    query: str = Query(""),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    if not query.strip():
        raise HTTPException(status_code=400, detail="Search term is required")

    products, total = CatalogService(db).list_products(1, SEARCH_LIMIT, query)

    return ApiResponse[List[ProductResponse]](data=products, total_count=total)


@router.get("/categories", response_model=ApiResponse[List[str]])
def list_categories(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    categories = CatalogService(db).categories()

    return ApiResponse[List[str]](data=categories, total_count=len(categories))


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return ApiResponse[ProductResponse](data=CatalogService(db).get_product(product_id))

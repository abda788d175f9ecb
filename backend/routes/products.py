# backend/routes/products.py
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from database import JsonDatabase, get_db
from schemas.result import DbResult
from utils.audit import write_log
import schemas.product as product_schemas

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])


# ---- HELPERS ----
def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None

def _unwrap(result: DbResult, action: str, request: Request, meta: Optional[dict] = None):
    """Return the result payload or raise the HTTP error matching the failure."""
    if result.success:
        return result.data

    if result.is_not_found:
        write_log(action=action, resource="products", status="NOT_FOUND",
                  ip=_client_ip(request), meta=meta)
        raise HTTPException(status_code=404, detail=result.message)

    # Raw I/O detail stays in the server log
    logger.error("%s failed: %s (%s)", action, result.message, result.error)
    write_log(action=action, resource="products", status="FAIL",
              ip=_client_ip(request), meta=meta)
    raise HTTPException(status_code=500, detail=result.message)

ProductId = Annotated[int, Path(gt=0, description="Product ID")]


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=product_schemas.ProductListResponse)
async def list_products(
    request: Request,
    category: Optional[str] = Query(None, description="Exact category, case-insensitive"),
    db: JsonDatabase = Depends(get_db),
):
    if category:
        result = await db.find_by_category(category)
    else:
        result = await db.read_all()

    products = _unwrap(result, "PRODUCTS_LIST", request)

    write_log(
        action="PRODUCTS_LIST", resource="products", status="SUCCESS",
        ip=_client_ip(request), meta={"category": category, "returned": len(products)},
    )
    return {"data": products, "message": result.message}


@router.get("/products/search", response_model=product_schemas.ProductListResponse)
async def search_products(
    request: Request,
    q: str = Query(..., description="Part of the product name, case-insensitive"),
    db: JsonDatabase = Depends(get_db),
):
    result = await db.find_by_name_contains(q)
    products = _unwrap(result, "PRODUCTS_SEARCH", request)
    return {"data": products, "message": result.message}


@router.get("/products/unique/categories", response_model=List[str])
async def get_product_categories(request: Request, db: JsonDatabase = Depends(get_db)):
    return _unwrap(await db.list_categories(), "CATEGORIES_LIST", request)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductResponse)
async def get_product(
    request: Request,
    product_id: ProductId,
    db: JsonDatabase = Depends(get_db),
):
    result = await db.get_by_id(product_id)
    product = _unwrap(result, "PRODUCT_GET", request, meta={"id": product_id})
    return {"data": product, "message": result.message}


# =========================
# CREATE
# =========================
@router.post("/products", response_model=product_schemas.ProductResponse, status_code=201)
async def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: JsonDatabase = Depends(get_db),
):
    result = await db.create(payload)
    product = _unwrap(result, "PRODUCT_CREATE", request, meta={"name": payload.name})

    write_log(
        action="PRODUCT_CREATE", resource="products", status="SUCCESS",
        ip=_client_ip(request), meta={"id": product.id, "name": product.name},
    )
    return {"data": product, "message": result.message}


# =========================
# PARTIAL UPDATE (PATCH)
# =========================
@router.patch("/products/{product_id}", response_model=product_schemas.ProductResponse)
async def edit_product(
    payload: product_schemas.ProductUpdate,
    request: Request,
    product_id: ProductId,
    db: JsonDatabase = Depends(get_db),
):
    result = await db.update(product_id, payload)
    product = _unwrap(result, "PRODUCT_EDIT", request, meta={"id": product_id})

    write_log(
        action="PRODUCT_EDIT", resource="products", status="SUCCESS",
        ip=_client_ip(request), meta={"id": product_id, "fields": sorted(payload.changes())},
    )
    return {"data": product, "message": result.message}


# =========================
# DELETE
# =========================
@router.delete("/products/{product_id}", response_model=product_schemas.MessageResponse)
async def delete_product(
    request: Request,
    product_id: ProductId,
    db: JsonDatabase = Depends(get_db),
):
    result = await db.delete(product_id)
    _unwrap(result, "PRODUCT_DELETE", request, meta={"id": product_id})

    write_log(action="PRODUCT_DELETE", resource="products", status="SUCCESS",
              ip=_client_ip(request), meta={"id": product_id})
    return {"message": result.message}

"""
Products API Endpoints
Handles product catalog management, restocking and filtering

Author: QuickSell
Date: 2025-10-17
"""
from fastapi import APIRouter, Body, Depends, Query
from typing import Any, Dict, Optional
from pydantic import BaseModel

from quicksell.api.dependencies import Container, get_container

router = APIRouter()


# Request models
class RestockRequest(BaseModel):
    amount: int


@router.get("/")
async def get_products(
    search: Optional[str] = Query(None, description="Search by name or SKU"),
    category: Optional[str] = Query(None, description="Filter by category ('All' for any)"),
    company: Optional[str] = Query(None, description="Filter by company ('All' for any)"),
    low_stock: Optional[bool] = Query(None, description="Only products at or below reorder level"),
    container: Container = Depends(get_container),
):
    """
    Get all products with optional filters

    Returns products with their low/out-of-stock flags
    """
    products = container.catalog.list_products(
        search=search,
        category=category,
        company=company,
        low_stock=low_stock,
    )

    return {
        "status": "success",
        "count": len(products),
        "data": [product.to_dict() for product in products]
    }


@router.get("/categories")
async def get_categories(container: Container = Depends(get_container)):
    """Sorted distinct product categories"""
    return {"status": "success", "data": container.catalog.categories()}


@router.get("/companies")
async def get_companies(container: Container = Depends(get_container)):
    """Sorted distinct product companies"""
    return {"status": "success", "data": container.catalog.companies()}


@router.get("/{product_id}")
async def get_product(product_id: str, container: Container = Depends(get_container)):
    product = container.catalog.get_product(product_id)
    return {"status": "success", "data": product.to_dict()}


@router.post("/", status_code=201)
async def create_product(
    payload: Dict[str, Any] = Body(..., description="Product fields (camelCase or snake_case)"),
    container: Container = Depends(get_container),
):
    """
    Add a product to the catalog

    The id is assigned by the store. An empty SKU gets a generated one.
    """
    with container.lock:
        product = container.catalog.add_product(payload)
    return {"status": "success", "data": product.to_dict()}


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    changes: Dict[str, Any] = Body(..., description="Fields to change"),
    container: Container = Depends(get_container),
):
    """Edit a product. Only the given fields change."""
    with container.lock:
        product = container.catalog.update_product(product_id, changes)
    return {"status": "success", "data": product.to_dict()}


@router.post("/{product_id}/restock")
async def restock_product(
    product_id: str,
    request: RestockRequest,
    container: Container = Depends(get_container),
):
    """Add received units to a product's stock"""
    with container.lock:
        product = container.catalog.restock(product_id, request.amount)
    return {"status": "success", "data": product.to_dict()}


@router.delete("/{product_id}")
async def delete_product(product_id: str, container: Container = Depends(get_container)):
    """Delete a product. Historical sales keep their line snapshots."""
    with container.lock:
        container.catalog.delete_product(product_id)
    return {"status": "success", "message": f"Product {product_id} deleted"}

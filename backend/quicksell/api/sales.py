"""
Sales API Endpoints
Transaction history and void

Author: QuickSell
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends

from quicksell.api.dependencies import Container, get_container

router = APIRouter()


@router.get("/")
async def get_sales(container: Container = Depends(get_container)):
    """All sales, newest first"""
    sales = container.analytics.sales_history()
    return {
        "status": "success",
        "count": len(sales),
        "data": [sale.to_record() for sale in sales]
    }


@router.get("/{sale_id}")
async def get_sale(sale_id: str, container: Container = Depends(get_container)):
    sale = container.reversal.find_sale(sale_id)
    return {"status": "success", "data": sale.to_record()}


@router.delete("/{sale_id}")
async def void_sale(sale_id: str, container: Container = Depends(get_container)):
    """
    Void a sale: delete it and put its quantities back in stock

    On failure neither the sale nor the stock changes.
    """
    with container.lock:
        sale = container.reversal.void_sale(sale_id)
    return {
        "status": "success",
        "message": f"Sale {sale_id} voided and stock restored",
        "data": sale.to_record()
    }

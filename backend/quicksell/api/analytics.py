"""
Analytics API Endpoints
Dashboard and reports figures

Author: QuickSell
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends

from quicksell.api.dependencies import Container, get_container

router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(container: Container = Depends(get_container)):
    """
    Today's and this year's revenue and profit, low stock alerts and
    revenue per month of the current year
    """
    return {"status": "success", "data": container.analytics.dashboard()}


@router.get("/reports")
async def get_reports(container: Container = Depends(get_container)):
    """
    Yearly and lifetime revenue/profit, average order value this year and a
    per-sale timeline
    """
    return {"status": "success", "data": container.analytics.reports()}

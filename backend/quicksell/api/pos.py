"""
Point of Sale API Endpoints
Cart building, keypad entry and checkout for the single POS session

Author: QuickSell
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from quicksell.api.dependencies import Container, get_container

router = APIRouter()


# Request models
class AddLineRequest(BaseModel):
    product_id: str = Field(..., alias="productId")

    model_config = ConfigDict(populate_by_name=True)


class SelectLineRequest(BaseModel):
    index: Optional[int] = None


class ActiveFieldRequest(BaseModel):
    field: str
    value: Union[float, str, None] = None


class KeypadRequest(BaseModel):
    key: Optional[str] = None
    mode: Optional[str] = None


class CheckoutRequest(BaseModel):
    payment_method: str = Field("Cash", alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


def _cart_response(container: Container) -> dict:
    return {"status": "success", "data": container.cart.to_dict()}


@router.get("/cart")
async def get_cart(container: Container = Depends(get_container)):
    """Current cart lines, selection and totals"""
    return _cart_response(container)


@router.post("/cart/lines")
async def add_cart_line(request: AddLineRequest, container: Container = Depends(get_container)):
    """
    Add one unit of a product to the cart

    Out-of-stock products are ignored; the response says whether the cart changed.
    """
    with container.lock:
        product = container.catalog.get_product(request.product_id)
        line = container.cart.add_line(product)
        response = _cart_response(container)
    response["added"] = line is not None
    return response


@router.delete("/cart/lines/{index}")
async def remove_cart_line(index: int, container: Container = Depends(get_container)):
    with container.lock:
        try:
            container.cart.remove_line(index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _cart_response(container)


@router.post("/cart/select")
async def select_cart_line(request: SelectLineRequest, container: Container = Depends(get_container)):
    """Make a line active (null clears the selection)"""
    with container.lock:
        try:
            container.cart.select_line(request.index)
        except IndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _cart_response(container)


@router.patch("/cart/active")
async def set_active_field(request: ActiveFieldRequest, container: Container = Depends(get_container)):
    """Set quantity, discount or price on the active line"""
    with container.lock:
        container.cart.set_active_field(request.field, request.value)
        return _cart_response(container)


@router.post("/cart/keypad")
async def press_keypad(request: KeypadRequest, container: Container = Depends(get_container)):
    """Switch keypad mode and/or feed one key ('C' clears)"""
    with container.lock:
        if request.mode is not None:
            container.cart.set_entry_mode(request.mode)
        if request.key is not None:
            container.cart.press_key(request.key)
        return _cart_response(container)


@router.delete("/cart")
async def clear_cart(container: Container = Depends(get_container)):
    with container.lock:
        container.cart.clear()
        return _cart_response(container)


@router.post("/checkout", status_code=201)
async def checkout(request: CheckoutRequest, container: Container = Depends(get_container)):
    """
    Settle the cart into a sale and decrement stock

    The cart is kept when settlement fails.
    """
    with container.lock:
        sale = container.settlement.checkout(container.cart, request.payment_method)
    if sale is None:
        raise HTTPException(status_code=400, detail="Cart is empty")
    return {"status": "success", "data": sale.to_record()}

# restobot/api/routes/restaurants.py
# Endpoints for reading and updating restaurant records

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from restobot.api.dependencies import get_store
from restobot.api.schemas import DeleteResponse
from restobot.services.store import RecordValidationError, RestaurantStore

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=List[Dict[str, Any]])
def list_restaurants(store: Annotated[RestaurantStore, Depends(get_store)]):
    # All records, insertion order
    return store.list()


@router.get("/{restaurant_id}")
def get_restaurant(
    restaurant_id: str, store: Annotated[RestaurantStore, Depends(get_store)]
):
    record = store.get(restaurant_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Restaurant {restaurant_id} not found",
        )
    return record


@router.post("/{restaurant_id}")
async def upsert_restaurant(
    restaurant_id: str,
    store: Annotated[RestaurantStore, Depends(get_store)],
    patch: Optional[Dict[str, Any]] = Body(None),
):
    # Merge menu / append offers unless replace / replaceOffers are set
    try:
        return await store.upsert(restaurant_id, patch or {})
    except RecordValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{restaurant_id}", response_model=DeleteResponse)
async def delete_restaurant(
    restaurant_id: str, store: Annotated[RestaurantStore, Depends(get_store)]
):
    if not await store.delete(restaurant_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Restaurant {restaurant_id} not found",
        )
    return DeleteResponse(id=restaurant_id)

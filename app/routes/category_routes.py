from typing import List

from fastapi import APIRouter

from app.config import CATEGORIES

router = APIRouter(prefix="/api", tags=["categories"])


@router.get("/categories", response_model=List[str])
async def list_categories():
    # fixed list, not derived from existing writings
    return CATEGORIES

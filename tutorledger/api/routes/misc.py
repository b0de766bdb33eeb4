from fastapi import APIRouter
from ...core.constants import CATEGORIES
from ...db import schemas

router = APIRouter(tags=["misc"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.get("/categories", response_model=list[schemas.CategoryDescription])
def list_categories():
    return [schemas.CategoryDescription.model_validate(info) for info in CATEGORIES.values()]

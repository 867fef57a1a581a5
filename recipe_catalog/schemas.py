from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Recipe(BaseModel):
    id: int
    cuisine: Optional[str] = Field(
        None, json_schema_extra={"example": "Southern Recipes"}
    )
    title: Optional[str] = Field(
        None, json_schema_extra={"example": "Sweet Potato Pie"}
    )
    rating: Optional[float] = Field(None, json_schema_extra={"example": 4.8})
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    total_time: Optional[int] = None
    description: Optional[str] = None
    nutrients: Optional[Dict[str, Any]] = Field(
        None,
        json_schema_extra={
            "example": {"calories": "389 kcal", "proteinContent": "5 g"}
        },
    )
    serves: Optional[str] = Field(
        None, json_schema_extra={"example": "8 servings"}
    )
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecipePage(BaseModel):
    page: int
    limit: int
    total: int
    data: List[Recipe]


class Health(BaseModel):
    status: str
    message: str

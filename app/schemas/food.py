"""Food listing request/response schemas - REST API contract."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.db.models.food_item import FoodCategory, FoodStatus


class DietaryFlags(BaseModel):
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    nut_free: bool = False
    dairy_free: bool = False


class FoodItemBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    quantity_unit: str = Field("servings", max_length=50)
    category: FoodCategory
    dietary: DietaryFlags = Field(default_factory=DietaryFlags)
    price: float = Field(0, ge=0)
    original_price: float = Field(0, ge=0)
    is_free: bool = True
    is_pickup_only: bool = True
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    address: str = Field("", max_length=500)
    images: list[str] = Field(default_factory=list)


class FoodItemCreate(FoodItemBase):
    expires_at: datetime


class FoodItemUpdate(BaseModel):
    """Descriptive fields only; status is owned by the swap ledger and the sweeper."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    quantity: int | None = Field(None, ge=1)
    quantity_unit: str | None = Field(None, max_length=50)
    category: FoodCategory | None = None
    dietary: DietaryFlags | None = None
    price: float | None = Field(None, ge=0)
    original_price: float | None = Field(None, ge=0)
    is_free: bool | None = None
    is_pickup_only: bool | None = None
    expires_at: datetime | None = None
    address: str | None = Field(None, max_length=500)
    images: list[str] | None = None


class FoodItemSummary(BaseModel):
    """Compact listing embedded in swap responses."""

    id: int
    title: str
    quantity: int
    quantity_unit: str
    price: float
    is_free: bool
    status: FoodStatus
    images: list[str] = []

    model_config = {"from_attributes": True}


class FoodItemResponse(FoodItemBase):
    id: int
    owner_id: int
    expires_at: datetime
    status: FoodStatus
    is_available: bool
    discount_percentage: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

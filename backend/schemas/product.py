# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict, HttpUrl, TypeAdapter, ValidationError, field_validator
from typing import Optional, List

from models.product import Product

_url_adapter = TypeAdapter(HttpUrl)


def _check_image_url(value: Optional[str]) -> Optional[str]:
    # Empty string means "no image"; anything else must be an http(s) URL.
    # The original string is kept, HttpUrl would normalize it.
    if value is None or value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid URL")
    return value


# Shared field configuration: accept both "imageUrl" and "image_url"
class ProductFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


# Schema for creating a new product
class ProductCreate(ProductFields):
    name: str = Field(min_length=3, description="Name must be at least 3 characters")
    category: str = Field(min_length=2, description="Category is required")
    price: float = Field(gt=0, description="Price must be positive")
    stock: int = Field(ge=0, description="Stock must be non-negative integer")
    rating: float = Field(ge=0, le=5, description="Rating must be between 0 and 5")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_image_url(v) or None


# Schema for partial product updates
class ProductUpdate(ProductFields):
    """Schema for PATCH requests - all fields optional.

    ``None`` means "keep the current value". An explicit empty ``imageUrl``
    clears the image.
    """
    name: Optional[str] = Field(None, min_length=3)
    category: Optional[str] = Field(None, min_length=2)
    price: Optional[float] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_image_url(v)

    def changes(self) -> dict:
        """Fields explicitly supplied with a value, keyed by attribute name."""
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None
        }


# ---- RESPONSES ----
class ProductResponse(BaseModel):
    data: Product
    message: str


class ProductListResponse(BaseModel):
    data: List[Product]
    message: str


class MessageResponse(BaseModel):
    message: str

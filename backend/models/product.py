# backend/models/product.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# Model Product
# A single catalog record as stored in the JSON data file.
# Field constraints are checked at the HTTP boundary (schemas/product.py),
# the stored record only carries the types.
class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    category: str
    price: float
    stock: int
    rating: float

    # Optional product image URL, "imageUrl" in the file and on the wire.
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    def to_record(self) -> dict:
        """Dict in the on-disk shape (wire names, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True)

"""Record schemas for catalog products and users.

Records arrive as plain JSON objects (from the catalog file or from worker
messages). Extra fields such as ``id`` are kept so they can be echoed back in
recommendations.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A catalog product.

    Attributes:
        name: Product name, used as its identity across records.
        category: Categorical product category.
        color: Categorical product color.
        price: Product price.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category")
    color: str = Field(..., description="Product color")
    price: float = Field(..., description="Product price")

    def meta(self) -> Dict[str, Any]:
        """Return every field of the record, extras included."""
        return self.model_dump()


class User(BaseModel):
    """A user with an age and a purchase history."""

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = Field(default=None, description="User name")
    age: float = Field(..., description="User age in years")
    purchases: List[Product] = Field(
        default_factory=list, description="Products the user bought"
    )

    def purchased_names(self) -> set:
        return {purchase.name for purchase in self.purchases}

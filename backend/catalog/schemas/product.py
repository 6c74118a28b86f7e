"""Product schemas shared by the search endpoint and the loader client."""

from pydantic import BaseModel


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: float | None = None
    category: str | None = None

    model_config = {"from_attributes": True}


class ErrorOut(BaseModel):
    """Error body: `{"error": "Internal Server Error"}`."""
    error: str

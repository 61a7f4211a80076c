# models.py
# Pydantic schemas

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

JobState = Literal["processing", "completed", "failed"]


class Product(BaseModel):
    """Product record as returned by the catalog webhook.

    Fields are untyped and unknown keys are kept: the catalog payload is not
    validated, and a product is forwarded to the generation webhook exactly as
    it was fetched.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    name: Any = None
    description: Any = None
    price: Any = None
    originalPrice: Any = None
    currency: Any = None
    images: Any = None
    mainImage: Any = None
    categoryId: Any = None
    categoryName: Any = None
    variants: Any = None
    shipFromCountries: Any = None
    sourceUrl: Any = None
    fetchedAt: Any = None

    def payload(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class GenerateRequest(BaseModel):
    # Plain dict so the body reaches the webhook unchanged
    product: Dict[str, Any]


class JobHandle(BaseModel):
    success: Optional[bool] = None
    status: Optional[str] = None
    jobId: Any = None
    productName: Optional[str] = None
    message: Optional[str] = None
    data: Optional[Any] = None
    resultsUrl: Optional[str] = None
    statusUrl: Optional[str] = None


class JobStatus(BaseModel):
    success: bool
    status: JobState
    message: Optional[str] = None
    progress: Optional[int] = None
    data: Optional[Any] = None
    error: Optional[str] = None

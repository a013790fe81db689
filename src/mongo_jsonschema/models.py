"""Models shared across mongo-jsonschema."""
from typing import Optional

from pydantic import BaseModel


class BasePydanticModel(BaseModel):
    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "frozen": True,
    }


class Violation(BasePydanticModel):
    """A single rule a document failed to satisfy."""
    path: str  # JSON path of the offending value, "$" for the document root
    message: str
    validator: Optional[str] = None  # JSON Schema keyword that failed, e.g. "required"

    def describe(self) -> str:
        return f"{self.path}: {self.message}"

"""Shared schema building blocks"""

from pydantic import BaseModel, PlainSerializer
from typing import Annotated, Optional
from decimal import Decimal

# Monetary amounts stay Decimal in Python and render as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
OptionalMoney = Optional[Money]

class BaseSchema(BaseModel):
    """Base schema with common configuration"""

    class Config:
        from_attributes = True
        use_enum_values = True

class MessageResponse(BaseModel):
    """Plain acknowledgement envelope"""
    success: bool = True
    message: str

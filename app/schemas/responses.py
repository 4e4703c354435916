"""Standardized API Response Schemas"""

from typing import Any, Dict, Generic, TypeVar, Optional
from pydantic import BaseModel


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.

    Example:
        {
            "success": true,
            "data": {...},
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: Optional[T] = None
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    """Error details structure"""
    code: str
    message: str
    field: Optional[str] = None
    details: Dict[str, Any] = {}


class ErrorResponse(BaseModel):
    """
    Standard error response envelope.

    Example:
        {
            "success": false,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Units consumed must be a non-negative whole number",
                "field": "units_consumed"
            }
        }
    """
    success: bool = False
    error: ErrorDetail

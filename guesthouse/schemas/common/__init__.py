from guesthouse.schemas.common.base import (
    HEX_COLOR_PATTERN,
    IdStr,
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from guesthouse.schemas.common.response import (
    CountResponse,
    ErrorDetail,
    ErrorResponse,
    SuccessResponse,
    WarningDetail,
)

__all__ = [
    "HEX_COLOR_PATTERN",
    "IdStr",
    "BaseCreateSchema",
    "BaseResponseSchema",
    "BaseSchema",
    "BaseUpdateSchema",
    "CountResponse",
    "ErrorDetail",
    "ErrorResponse",
    "SuccessResponse",
    "WarningDetail",
]

from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import (
    ErrorCode,
    ServiceError,
    ServiceResult,
    ServiceWarning,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ServiceError",
    "ServiceResult",
    "ServiceWarning",
]

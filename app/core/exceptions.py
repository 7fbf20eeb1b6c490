from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BUSINESS_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}


class DomainError(Exception):
    """Error de dominio con un tipo cerrado que el router traduce a HTTP"""

    kind: ErrorKind = ErrorKind.BUSINESS_RULE

    def __init__(self, message: str, kind: Optional[ErrorKind] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION


class BusinessRuleError(DomainError):
    kind = ErrorKind.BUSINESS_RULE


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    logger.info(f"{request.method} {request.url.path} - {exc.kind.value}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "kind": exc.kind.value,
            "details": exc.details,
        }
    )


def setup_exception_handlers(app: FastAPI):
    """Registrar el mapeo de errores de dominio a códigos HTTP"""
    app.add_exception_handler(DomainError, domain_error_handler)

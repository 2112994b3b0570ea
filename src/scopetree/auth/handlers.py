"""
Exception handlers mapping scope errors to HTTP responses.

Security actions:
1. Log the rejected key and prefix (sanitized)
2. Return a sanitized error, never the offending path
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from scopetree.errors import InvalidArgumentError, InvalidScopeHierarchyError
from scopetree.logging.audit_logger import get_audit_logger
from scopetree.models.responses import ErrorResponse


async def invalid_scope_handler(
    request: Request,
    exc: InvalidScopeHierarchyError,
) -> JSONResponse:
    """Reject a request whose scope does not fit the declared grammar."""
    # Tree.parse already records its own rejections
    if not exc.audited:
        get_audit_logger().log_hierarchy_rejected(
            tree=exc.path[0] if exc.path else "<unknown>",
            key=exc.key,
            path=exc.path,
            reason=exc.reason,
            route=request.url.path,
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="invalid_scope",
            detail="Scope is not valid for this API",
        ).model_dump(mode="json"),
    )


async def invalid_argument_handler(
    request: Request,
    exc: InvalidArgumentError,
) -> JSONResponse:
    """Reject a request carrying a malformed scope string."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="malformed_scope",
            detail="Scope string is malformed",
        ).model_dump(mode="json"),
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidScopeHierarchyError, invalid_scope_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)

"""
Route-level scope guards for FastAPI.

Design principle: the caller's granted scopes are checked against the
required scopes with the coverage algebra, so ``accounts.*`` granted
satisfies ``accounts.1.read`` required.

How the caller's grants are obtained (JWT, session, API key) is left to
the application: it passes a FastAPI dependency returning them.
"""

from typing import Any, Callable, Literal, Optional

from fastapi import Depends, HTTPException, status

from scopetree.logging.audit_logger import get_audit_logger
from scopetree.scopes.alias_map import AliasMap
from scopetree.scopes.collection import Scopes


GuardMode = Literal["all", "any"]


def require_scope(
    *required_scopes: Any,
    grants: Callable[..., Any],
    aliases: Optional[AliasMap] = None,
    mode: GuardMode = "all",
) -> Callable:
    """
    Dependency factory for route-level scope guards.

    Usage:
        guard = require_scope("api.products.*.read", grants=get_granted_scopes)

        @router.get("/products", dependencies=[Depends(guard)])
        async def list_products():
            ...

    Security model:
        - mode="all": every required scope must be covered by some grant
        - mode="any": at least one required scope must be covered
        - Grants are passed through ``aliases.map`` first when given
        - Missing scope = 403 Forbidden (not 401)
        - Logs scope check result for forensics
    """
    if mode not in ("all", "any"):
        raise ValueError(f"unknown guard mode: {mode!r}")

    required = Scopes(required_scopes)
    required_list = required.to_list()

    async def scope_guard(granted_raw: Any = Depends(grants)) -> Scopes:
        logger = get_audit_logger()

        granted = aliases.map(granted_raw) if aliases is not None else Scopes.wrap(granted_raw)

        matched = [granted.resolve(s) for s in required]
        missing = [str(s) for s, hit in zip(required, matched) if hit is None]
        hits = [str(hit) for hit in matched if hit is not None]

        if mode == "all":
            allowed = not missing
        else:
            allowed = granted.can(required)

        if not allowed:
            logger.log_authorization_failure(
                required_scopes=required_list,
                granted_count=len(granted),
                missing_scopes=missing,
                mode=mode,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient scope",
                headers={"WWW-Authenticate": f'Bearer scope="{" ".join(required_list)}"'},
            )

        logger.log_authorization_success(
            required_scopes=required_list,
            matched_scopes=list(dict.fromkeys(hits)),
            mode=mode,
        )
        return granted

    return scope_guard

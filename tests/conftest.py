"""
Pytest fixtures for scopetree tests.
"""

import pytest
from fastapi import Depends, FastAPI, Header
from httpx import ASGITransport, AsyncClient

from scopetree import AliasMap, Scopes, Tree
from scopetree.auth import install_exception_handlers, require_scope
from scopetree.logging.audit_logger import get_audit_logger


INTEGER = r"^\d+$"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset singleton state between tests for isolation."""
    get_audit_logger.cache_clear()
    yield
    get_audit_logger.cache_clear()


@pytest.fixture
def products_tree() -> Tree:
    """Literal-only grammar where products.own and products.all differ."""
    def declare(bolder):
        bolder.add_path("api.products.own.read")
        bolder.add_path("api.products.own.delete")
        bolder.add_path("api.products.all.read")
        bolder.add_path("api.orders.own.read")

    return Tree("bolder", declare)


@pytest.fixture
def shop_tree() -> Tree:
    """Grammar with aliased, constrained and plain any-nodes."""
    def declare(bolder):
        accounts = bolder.add("api").add("accounts")
        account = accounts.any("resource_account", "own_account", pattern=INTEGER)
        shops = account.add("shops").add("resource_shops")
        shops.add("contacts").any().add("read")
        shops.add("products").any().add("read")
        shops.add("orders").any(pattern=INTEGER).add("read")
        shops.add("settings").any().add("update")

    return Tree("bolder", declare)


@pytest.fixture
def member_tree() -> Tree:
    """Single any-node with two aliases and an integer constraint."""
    def declare(api):
        groups = api.add("groups").any("admin", "member", pattern=INTEGER)
        groups.add("read")
        groups.add("write")

    return Tree("api", declare)


@pytest.fixture
def aliases() -> AliasMap:
    return AliasMap({
        "admin": ["btc.me", "btc.account.shops.mine"],
        "public": ["btc.me", "btc.shops.list.public"],
    })


def get_granted_scopes(x_scopes: str = Header(default="")) -> list[str]:
    """Test grant source: space-separated scopes in the X-Scopes header."""
    return [s for s in x_scopes.split(" ") if s]


@pytest.fixture
def app() -> FastAPI:
    """Small app with scope-guarded routes."""
    application = FastAPI()
    install_exception_handlers(application)
    superusers = AliasMap({"superuser": ["api"]})
    grammar = Tree("api", lambda api: api.add("orders").add("read"))

    @application.get("/validate/{scope}")
    async def validate(scope: str):
        return {"scope": str(grammar.parse(scope))}

    @application.get("/orders/{action}")
    async def order_action(action: str):
        return {"scope": str(grammar.cursor().step("orders").step(action))}

    @application.get("/orders")
    async def list_orders(
        granted: Scopes = Depends(
            require_scope("api.orders.read", grants=get_granted_scopes)
        ),
    ):
        return {"granted": granted.to_list()}

    @application.get(
        "/accounts/1/orders",
        dependencies=[
            Depends(
                require_scope(
                    "api.accounts.1.orders.read",
                    "api.accounts.1.read",
                    grants=get_granted_scopes,
                )
            )
        ],
    )
    async def account_orders():
        return {"status": "ok"}

    @application.get(
        "/admin",
        dependencies=[
            Depends(
                require_scope("api.admin", grants=get_granted_scopes, aliases=superusers)
            )
        ],
    )
    async def admin():
        return {"status": "ok"}

    @application.get(
        "/reports",
        dependencies=[
            Depends(
                require_scope(
                    "api.reports.sales",
                    "api.reports.stock",
                    grants=get_granted_scopes,
                    mode="any",
                )
            )
        ],
    )
    async def reports():
        return {"status": "ok"}

    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

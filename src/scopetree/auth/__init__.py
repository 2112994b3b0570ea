from .guards import require_scope
from .handlers import install_exception_handlers

__all__ = ["require_scope", "install_exception_handlers"]

from .crud_controller import CrudController, Operation
from .error_handlers import error_response, register_exception_handlers
from .status import router as status_router

__all__ = [
    "CrudController",
    "Operation",
    "error_response",
    "register_exception_handlers",
    "status_router",
]

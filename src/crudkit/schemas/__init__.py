from .envelope import Status, ErrorDetail, APIResponse

__all__ = ["Status", "ErrorDetail", "APIResponse"]

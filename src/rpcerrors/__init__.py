from .codes import Code
from .errors import CodedError, RpcError, error_code, errorf, new

__all__ = [
    "Code",
    "CodedError",
    "RpcError",
    "error_code",
    "errorf",
    "new",
]

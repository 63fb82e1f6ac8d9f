from typing import Dict, List, Optional

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        errors: Optional[Dict[str, List[str]]] = None,
        error: Optional[str] = None,
        success: Optional[bool] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.errors = errors
        self.error = error
        self.success = success
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, diagnostic: Optional[str] = None):
        self.base_error = base_error
        self.diagnostic = diagnostic
        super().__init__(base_error.message)

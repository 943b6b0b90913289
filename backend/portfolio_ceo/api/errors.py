from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import HTTPException, status

from portfolio_ceo.services.result import Err, ErrorKind

logger = logging.getLogger("portfolio_ceo.api")

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
}


def raise_for_err(error: Err) -> NoReturn:
    """Translate a domain error into an HTTP error; remote failures become 502."""
    status_code = _STATUS_BY_KIND.get(error.kind, status.HTTP_502_BAD_GATEWAY)
    if status_code == status.HTTP_502_BAD_GATEWAY:
        logger.warning("Upstream failure (%s): %s", error.kind.value, error.message)
    raise HTTPException(status_code=status_code, detail=error.message)

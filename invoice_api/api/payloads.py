# invoice_api/api/payloads.py

import logging
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import Column

from invoice_api.errors import FIELD_TOO_LONG, PARSE_ERROR_MSG, BadRequest, ValidationFailed

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_payload(model: Type[M], payload: Any) -> M:
    """Validate a decoded JSON body; malformed input is a 400."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.info("Rejected %s payload: %s", model.__name__, e.errors())
        raise BadRequest(PARSE_ERROR_MSG) from e


def check_length(column: Column, value: str) -> str:
    """Reject text longer than the column's declared length."""
    limit = column.type.length
    if limit is not None and len(value) > limit:
        raise ValidationFailed(FIELD_TOO_LONG.format(field=column.name, limit=limit))
    return value

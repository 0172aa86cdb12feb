from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Iterable, Type, TypeVar

import pydantic
from flask import request
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..common.datetime_utils import to_local_naive
from ..core.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)

# Incoming timestamps, offset-aware or not, end up as naive server-local time.
LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]


class ApiModel(BaseModel):
    """Base DTO: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


def parse_body(model: Type[M]) -> M:
    """Validate the JSON request body into ``model``; failures become a 400."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return parse_data(model, data)


def parse_args(model: Type[M]) -> M:
    return parse_data(model, request.args.to_dict())


def parse_data(model: Type[M], data: dict) -> M:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": "", "message": "Invalid request"}
        raise ValidationError(f"{first['field']}: {first['message']}".strip(": "), errors=errors)


def dump(model: Type[BaseModel], obj: Any) -> dict:
    return model.model_validate(obj).model_dump(mode="json", by_alias=True)


def dump_many(model: Type[BaseModel], items: Iterable[Any]) -> list[dict]:
    return [dump(model, item) for item in items]

"""Request body schemas shared by the JSON blueprints.

Bodies are validated with pydantic; any validation failure becomes a
``BadRequest`` so the app-level handler answers with ``invalid_request``.
"""
from typing import Optional, TypeVar, Union

from flask import request
from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    constr,
)
from werkzeug.exceptions import BadRequest

Id = constr(strict=True, strip_whitespace=True, min_length=1, max_length=64)

M = TypeVar("M", bound=BaseModel)


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CharacterCreate(_Body):
    name: constr(strict=True, strip_whitespace=True, min_length=2, max_length=20)


class InventoryUpdate(_Body):
    item_id: Id
    quantity: StrictInt
    is_equipped: Optional[StrictBool] = None


class AfkStart(_Body):
    character_id: Id
    duration_hours: StrictInt


class ListingCreate(_Body):
    seller_id: Id
    item_id: Id
    quantity: StrictInt
    # parsed into money by the market service
    price_per_unit: Union[StrictStr, StrictInt, StrictFloat]


class Purchase(_Body):
    buyer_id: Id


class ChatPost(_Body):
    user_id: Id
    message: constr(strict=True, strip_whitespace=True, min_length=1, max_length=500)


def json_body() -> dict:
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("JSON object expected")
    return data


def _describe(err: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or 'body'}: {e['msg']}" for e in err.errors()
    )


def parse_body(schema: type[M]) -> M:
    try:
        return schema.model_validate(json_body())
    except ValidationError as e:
        raise BadRequest(_describe(e)) from None

"""Translation between payload/DTO shapes and storage row shapes.

Row builders select the storable fields of a payload, rename payload names to
column names and prune ``None`` values so that partial updates only touch the
columns that were provided.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from app.domain.schemas.admin import AdminRead
from app.domain.schemas.category import CategoryRead
from app.domain.schemas.product import ProductRead
from app.domain.schemas.user import UserRead

Payload = Union[Mapping[str, Any], BaseModel]

USER_FIELDS = ("first_name", "last_name", "email", "password")
ADMIN_FIELDS = ("is_super",)
CATEGORY_FIELDS = ("title",)
PRODUCT_FIELDS = ("title", "slug", "description", "featured", "active", "category_id")

# payload name -> column name
PRODUCT_RENAMES = {"category": "category_id", "is_featured": "featured", "is_active": "active"}
# columns an explicit null is written to instead of being skipped
PRODUCT_NULLABLE = ("category_id",)


def as_dict(payload: Optional[Payload]) -> Dict[str, Any]:
    if payload is None:
        return {}
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_unset=True)
    return dict(payload)


def prune_none(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _pick(
    payload: Payload,
    fields: Iterable[str],
    renames: Optional[Mapping[str, str]] = None,
    nullable: Iterable[str] = (),
) -> Dict[str, Any]:
    data = as_dict(payload)
    for source, target in (renames or {}).items():
        if source in data and target not in data:
            data[target] = data.pop(source)
    row = prune_none({field: data.get(field) for field in fields})
    row.update({field: None for field in nullable if field in data and data[field] is None})
    return row


def to_user_row(payload: Payload) -> Dict[str, Any]:
    return _pick(payload, USER_FIELDS)


def to_admin_row(payload: Payload) -> Dict[str, Any]:
    return _pick(payload, ADMIN_FIELDS)


def to_category_row(payload: Payload) -> Dict[str, Any]:
    return _pick(payload, CATEGORY_FIELDS)


def to_product_row(payload: Payload) -> Dict[str, Any]:
    return _pick(payload, PRODUCT_FIELDS, PRODUCT_RENAMES, PRODUCT_NULLABLE)


def to_user_dto(row: Mapping[str, Any]) -> UserRead:
    return UserRead.model_validate(dict(row))


def to_admin_dto(row: Mapping[str, Any]) -> AdminRead:
    return AdminRead.model_validate(dict(row))


def to_category_dto(row: Mapping[str, Any]) -> CategoryRead:
    return CategoryRead.model_validate(dict(row))


def to_product_dto(
    row: Mapping[str, Any],
    attributes: Sequence[Mapping[str, Any]] = (),
    images: Sequence[Mapping[str, Any]] = (),
) -> ProductRead:
    data = dict(row)
    data["attributes"] = [dict(a) for a in attributes]
    data["images"] = [dict(i) for i in images]
    return ProductRead.model_validate(data)

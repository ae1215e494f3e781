from __future__ import annotations

import re
from typing import Mapping

from mongoengine import BooleanField, FloatField, IntField
from mongoengine.queryset import QuerySet

from tour_booking.utils.errors import AppError


RESERVED_PARAMS = ("page", "sort", "limit", "fields")
OPERATOR_PATTERN = re.compile(r"^(?P<field>\w+)\[(?P<op>gte|gt|lte|lt)\]$")

DEFAULT_SORT = "-created_at"
DEFAULT_LIMIT = 100


class QueryFeatures:
    """Applies list-endpoint query parameters to a mongoengine queryset.

    Supports `field=value` and `field[gte|gt|lte|lt]=value` filters, `sort`
    (comma separated, `-` prefix for descending), `fields` projection and
    `page`/`limit` pagination. Each step returns self so calls chain.
    """

    def __init__(self, queryset: QuerySet, params: Mapping[str, str]) -> None:
        self.queryset = queryset
        self.params = dict(params)
        self.document = queryset._document
        self.selected_fields: list[str] | None = None

    def _check_field(self, name: str) -> None:
        if name not in self.document._fields:
            raise AppError(f"Invalid field: {name}", 400)

    def _coerce(self, name: str, value: str):
        field = self.document._fields[name]
        try:
            if isinstance(field, IntField):
                return int(value)
            if isinstance(field, FloatField):
                return float(value)
            if isinstance(field, BooleanField):
                if value.lower() not in ("true", "false"):
                    raise ValueError(value)
                return value.lower() == "true"
        except ValueError:
            raise AppError(f"Invalid value for {name}: {value}", 400)
        return value

    def filter(self) -> "QueryFeatures":
        conditions = {}
        for key, value in self.params.items():
            if key in RESERVED_PARAMS:
                continue
            match = OPERATOR_PATTERN.match(key)
            if match:
                name, op = match.group("field"), match.group("op")
                self._check_field(name)
                conditions[f"{name}__{op}"] = self._coerce(name, value)
            else:
                self._check_field(key)
                conditions[key] = self._coerce(key, value)

        self.queryset = self.queryset.filter(**conditions)
        return self

    def sort(self) -> "QueryFeatures":
        keys = [key.strip() for key in self.params.get("sort", DEFAULT_SORT).split(",") if key.strip()]
        for key in keys:
            self._check_field(key.lstrip("-+"))
        self.queryset = self.queryset.order_by(*keys)
        return self

    def limit_fields(self) -> "QueryFeatures":
        raw = self.params.get("fields")
        if raw:
            fields = [name.strip() for name in raw.split(",") if name.strip()]
            for name in fields:
                self._check_field(name)
            self.selected_fields = fields
            self.queryset = self.queryset.only(*fields)
        return self

    def paginate(self) -> "QueryFeatures":
        try:
            page = int(self.params.get("page", 1))
            limit = int(self.params.get("limit", DEFAULT_LIMIT))
        except ValueError:
            raise AppError("page and limit must be integers", 400)
        if page < 1 or limit < 1:
            raise AppError("page and limit must be positive", 400)

        self.queryset = self.queryset.skip((page - 1) * limit).limit(limit)
        return self

    def apply(self) -> "QueryFeatures":
        return self.filter().sort().limit_fields().paginate()

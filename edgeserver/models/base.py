# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Common base model for camelCase EdgeServer payloads."""
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


# Opaque JSON values (task payloads, tool results) are kept schema-free.
type JsonValue = Any


class EdgeModel(BaseModel):
    """Base for all wire models.

    Python attributes are snake_case; the JSON representation uses the
    camelCase names EdgeServer sends and expects. Unknown keys are ignored
    so newer servers can add fields without breaking older clients, and a
    JSON ``null`` for a field that is not nullable reads as that field's
    default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def null_as_default(cls, data: Any) -> Any:
        """Drop ``null`` values of fields whose default is not None."""
        if not isinstance(data, dict) or None not in data.values():
            return data

        data = dict(data)
        for name, field in cls.model_fields.items():
            if field.default is None:
                continue
            for key in {name, field.alias}:
                if key is not None and key in data and data[key] is None:
                    del data[key]
        return data

    def to_wire(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict using wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

'''
Shared bases for the entity models.
'''
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class FormModel(BaseModel):
    """
    Base for every create/update payload.
    Form fields left blank arrive as empty strings; they are read as None so
    optional fields stay unset and required ones fail validation.
    """
    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: (None if isinstance(value, str) and not value.strip() else value)
                for key, value in data.items()
            }
        return data


class ReadModel(BaseModel):
    """Base for models read straight from ORM rows."""
    model_config = ConfigDict(from_attributes=True)

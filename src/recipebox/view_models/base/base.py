from humps import camelize
from pydantic import BaseModel as PydanticBaseModel
from pydantic import field_validator


class BaseModel(PydanticBaseModel):
    @field_validator("*", mode="before")
    def blank_str_to_none(cls, x):
        """
        Treat blank strings in request payloads as absent values.

        :param x: The raw attribute value
        :return: None if x is an empty or whitespace-only string, otherwise x unchanged
        """
        if isinstance(x, str) and not x.strip():
            return None
        return x

    class Config:
        alias_generator = camelize
        populate_by_name = True

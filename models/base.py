from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire and in the store."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

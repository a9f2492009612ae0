from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # 응답 JSON은 camelCase (notebookId, createdAt ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str

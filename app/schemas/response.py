"""
Response Schemas
"""
from pydantic import BaseModel, ConfigDict, Field


class GenerationResult(BaseModel):
    """호출자에게 반환하는 정규화된 이미지"""
    model_config = ConfigDict(populate_by_name=True)

    base64_data: str = Field(alias="base64Data", min_length=1)
    mime_type: str = Field(alias="mimeType", min_length=1)


class ErrorResponse(BaseModel):
    message: str

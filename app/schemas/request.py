"""
Request Schemas
"""
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, field_validator


class ImagePromptRequest(BaseModel):
    """이미지 생성 엔드포인트 요청 본문"""
    prompt: str

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be empty")
        return value


@dataclass
class GenerationRequest:
    """Gemini generateContent 요청 페이로드"""
    prompt: str
    model: str
    response_modalities: List[str] = field(default_factory=lambda: ["TEXT", "IMAGE"])
    aspect_ratio: Optional[str] = None

    def to_payload(self) -> dict:
        generation_config = {"responseModalities": list(self.response_modalities)}
        if self.aspect_ratio:
            generation_config["imageConfig"] = {"aspectRatio": self.aspect_ratio}
        return {
            "contents": [{"parts": [{"text": self.prompt}]}],
            "generationConfig": generation_config,
        }

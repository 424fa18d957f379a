from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional

class FetchRequest(BaseModel):
    url: str = Field(description="Absolute URL of the resource to fetch")
    headers: Optional[Dict[str, str]] = Field(
        default=None, description="Extra request headers, merged over the defaults"
    )

class TextContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str

class FetchResult(BaseModel):
    """
    Uniform answer of every fetch operation.

    Success carries two segments (saved path, then content type); failure
    carries a single segment with the error message.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: List[TextContent] = Field(min_length=1)
    is_error: bool = Field(alias="isError")

    @classmethod
    def saved(cls, file_path: str, content_type: str) -> "FetchResult":
        return cls(
            content=[
                TextContent(text=f"File saved to: {file_path}"),
                TextContent(text=f"Content-Type: {content_type}"),
            ],
            is_error=False,
        )

    @classmethod
    def failure(cls, message: str) -> "FetchResult":
        return cls(content=[TextContent(text=message or "Unknown error")], is_error=True)

    @property
    def message(self) -> str:
        return "\n".join(segment.text for segment in self.content)

from dataclasses import dataclass
from enum import Enum

class OutputKind(str, Enum):
    HTML = "html"
    JSON = "json"
    TEXT = "text"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

_EXTENSIONS = {
    OutputKind.HTML: "html",
    OutputKind.JSON: "json",
    OutputKind.TEXT: "txt",
    OutputKind.MARKDOWN: "md",
}

_CONTENT_TYPES = {
    OutputKind.HTML: "text/html",
    OutputKind.JSON: "application/json",
    OutputKind.TEXT: "text/plain",
    OutputKind.MARKDOWN: "text/markdown",
}

@dataclass(frozen=True)
class TransformedContent:
    content: str
    content_type: str
    extension: str

class BaseTransformer:
    kind: OutputKind

    def transform(self, body: str) -> TransformedContent:
        raise NotImplementedError

    def _result(self, content: str) -> TransformedContent:
        return TransformedContent(
            content=content,
            content_type=self.kind.content_type,
            extension=self.kind.extension,
        )

import json
import re
from typing import Dict

from bs4 import BeautifulSoup, ParserRejectedMarkup
from markdownify import ATX, MarkdownConverter

from deferred_fetch.core.errors import TransformError
from deferred_fetch.fetch.base import BaseTransformer, OutputKind, TransformedContent

def _parse_html(html: str) -> BeautifulSoup:
    """Parse HTML and drop <script>/<style> elements."""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise TransformError(f"Failed to parse HTML: {e}") from e

    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup

class HtmlTransformer(BaseTransformer):
    kind = OutputKind.HTML

    def transform(self, body: str) -> TransformedContent:
        return self._result(body)

class JsonTransformer(BaseTransformer):
    kind = OutputKind.JSON

    def transform(self, body: str) -> TransformedContent:
        try:
            data = json.loads(body)
        except ValueError as e:
            raise TransformError(str(e)) from e
        return self._result(json.dumps(data, indent=2, ensure_ascii=False))

class TextTransformer(BaseTransformer):
    kind = OutputKind.TEXT

    def transform(self, body: str) -> TransformedContent:
        soup = _parse_html(body)
        # html.parser does not synthesize <body> for fragments
        root = soup.body or soup
        text = re.sub(r"\s+", " ", root.get_text()).strip()
        return self._result(text)

class MarkdownTransformer(BaseTransformer):
    kind = OutputKind.MARKDOWN

    def __init__(self, heading_style: str = ATX):
        self._converter = MarkdownConverter(heading_style=heading_style)

    def transform(self, body: str) -> TransformedContent:
        soup = _parse_html(body)
        markdown = self._converter.convert_soup(soup)
        return self._result(markdown.strip())

TRANSFORMERS: Dict[OutputKind, BaseTransformer] = {
    OutputKind.HTML: HtmlTransformer(),
    OutputKind.JSON: JsonTransformer(),
    OutputKind.TEXT: TextTransformer(),
    OutputKind.MARKDOWN: MarkdownTransformer(),
}

def get_transformer(kind: OutputKind) -> BaseTransformer:
    try:
        return TRANSFORMERS[OutputKind(kind)]
    except (KeyError, ValueError):
        raise TransformError(f"Unsupported output format: {kind}") from None

def transform(body: str, kind: OutputKind) -> TransformedContent:
    return get_transformer(kind).transform(body)

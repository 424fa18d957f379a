import pytest
from pydantic import ValidationError
from deferred_fetch.schemas import FetchRequest, FetchResult, TextContent

class TestSchemaValidation:
    """Unit tests for Pydantic schema validation"""

    def test_request_with_headers(self):
        request = FetchRequest(url="https://example.com", headers={"Custom-Header": "Value"})
        assert request.url == "https://example.com"
        assert request.headers == {"Custom-Header": "Value"}

    def test_request_headers_optional(self):
        assert FetchRequest(url="https://example.com").headers is None

    def test_request_requires_url(self):
        with pytest.raises(ValidationError):
            FetchRequest()

    def test_header_values_must_be_strings(self):
        with pytest.raises(ValidationError):
            FetchRequest(url="https://example.com", headers={"X-Count": ["1", "2"]})

class TestFetchResult:
    """Unit tests for the uniform result shape"""

    def test_saved_segments_in_order(self):
        result = FetchResult.saved("/tmp/downloads/page.html", "text/html")
        assert result.is_error is False
        assert [c.text for c in result.content] == [
            "File saved to: /tmp/downloads/page.html",
            "Content-Type: text/html",
        ]

    def test_failure_single_segment(self):
        result = FetchResult.failure("Failed to fetch https://example.com: HTTP error: 404")
        assert result.is_error is True
        assert len(result.content) == 1
        assert result.message == "Failed to fetch https://example.com: HTTP error: 404"

    def test_failure_never_empty(self):
        assert FetchResult.failure("").message == "Unknown error"

    def test_serializes_with_is_error_alias(self):
        data = FetchResult.saved("/x.md", "text/markdown").model_dump(by_alias=True)
        assert data == {
            "content": [
                {"type": "text", "text": "File saved to: /x.md"},
                {"type": "text", "text": "Content-Type: text/markdown"},
            ],
            "isError": False,
        }

    def test_accepts_alias_on_input(self):
        result = FetchResult.model_validate({"content": [{"type": "text", "text": "boom"}], "isError": True})
        assert result.is_error is True

    def test_content_required(self):
        with pytest.raises(ValidationError):
            FetchResult(content=[], is_error=True)

    def test_immutable(self):
        result = FetchResult.failure("boom")
        with pytest.raises(ValidationError):
            result.is_error = False

    def test_text_content_type_fixed(self):
        with pytest.raises(ValidationError):
            TextContent(type="image", text="x")

from http_to_postman.parser.base import (
    Body,
    Collection,
    Header,
    Info,
    Item,
    Request,
    Url,
    Variable,
)


class TestHeader:
    def test_header_defaults_to_text_type(self):
        h = Header(key="Accept", value="application/json")
        assert h.type == "text"


class TestVariable:
    def test_variable_defaults_to_string_type(self):
        v = Variable(key="baseUrl", value="http://localhost")
        assert v.model_dump() == {"key": "baseUrl", "value": "http://localhost", "type": "string"}


class TestItemSerialization:
    def test_request_item_uses_postman_keys(self):
        item = Item(
            name="request-1",
            request=Request(
                method="GET",
                headers=[Header(key="Accept", value="*/*")],
                url=Url(raw="https://example.com", protocol="https", host=["example", "com"]),
            ),
        )
        data = item.model_dump(by_alias=True, exclude_none=True)
        assert data["request"]["header"] == [{"key": "Accept", "value": "*/*", "type": "text"}]
        assert data["request"]["body"] == {}
        assert "item" not in data
        assert "description" not in data

    def test_folder_item_has_no_request(self):
        folder = Item(
            name="USERS",
            items=[Item(name="a", request=Request(method="GET", url=Url(raw="x")))],
        )
        data = folder.model_dump(by_alias=True, exclude_none=True)
        assert "request" not in data
        assert data["item"][0]["name"] == "a"

    def test_empty_url_parts_are_omitted(self):
        data = Url(raw="localhost", host=["localhost"]).model_dump(by_alias=True, exclude_none=True)
        assert data == {"raw": "localhost", "host": ["localhost"]}


class TestCollection:
    def test_to_json_uses_schema_and_item_keys(self):
        collection = Collection(
            info=Info(name="jb-export-20240101000000", schema_url="https://schema.example/v2.1.0"),
            variables=[Variable(key="token", value="")],
        )
        text = collection.to_json()
        assert '"schema": "https://schema.example/v2.1.0"' in text
        assert '"item": []' in text
        assert '"variable": [' in text
        assert '\n  "info"' in text

    def test_body_options_serialized(self):
        body = Body(mode="raw", raw="{}", options={"raw": {"language": "json"}})
        assert body.model_dump(exclude_none=True) == {
            "mode": "raw",
            "raw": "{}",
            "options": {"raw": {"language": "json"}},
        }

"""Tests for message payload encoding."""

import io
import json
import threading
from email.parser import BytesParser

import pytest

from cordial.core.payload import CONTENT_TYPE_JSON, encode_create_message
from cordial.errors import EncodingError
from cordial.models import Embed
from cordial.params import CreateMessageParams, FileParams


def parse_multipart(body: bytes, content_type: str) -> list:
    raw = b"Content-Type: " + content_type.encode() + b"\r\n\r\n" + body
    message = BytesParser().parsebytes(raw)
    assert message.is_multipart()
    return message.get_payload()


def part_name(part) -> str:
    return part.get_param("name", header="content-disposition")


class _ThreadRecordingReader(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.read_on: threading.Thread | None = None

    def read(self, *args):
        self.read_on = threading.current_thread()
        return super().read(*args)


class _BrokenReader:
    def read(self, *args):
        raise OSError("disk on fire")


class TestJSONPayload:
    async def test_plain_draft(self):
        encoded = await encode_create_message(CreateMessageParams(content="hi"))
        assert encoded.content_type == CONTENT_TYPE_JSON
        assert json.loads(encoded.body) == {"content": "hi"}

    async def test_spoiler_content(self):
        encoded = await encode_create_message(
            CreateMessageParams(content="hi", spoiler_tag_content=True)
        )
        assert json.loads(encoded.body)["content"] == "|| hi ||"

    async def test_spoiler_skips_empty_content(self):
        encoded = await encode_create_message(
            CreateMessageParams(content="", spoiler_tag_content=True)
        )
        assert json.loads(encoded.body)["content"] == ""

    async def test_directives_not_serialized(self):
        encoded = await encode_create_message(
            CreateMessageParams(content="hi", spoiler_tag_content=True, spoiler_tag_all_attachments=True)
        )
        doc = json.loads(encoded.body)
        assert "spoiler_tag_content" not in doc
        assert "spoiler_tag_all_attachments" not in doc
        assert "files" not in doc

    async def test_optional_fields(self):
        params = CreateMessageParams(
            content="hi", nonce="abc", tts=True, embed=Embed(title="t", color=0xFF0000)
        )
        doc = json.loads((await encode_create_message(params)).body)
        assert doc == {
            "content": "hi",
            "nonce": "abc",
            "tts": True,
            "embed": {"title": "t", "color": 0xFF0000},
        }

    async def test_caller_params_untouched(self):
        params = CreateMessageParams(content="hi", spoiler_tag_content=True)
        await encode_create_message(params)
        await encode_create_message(params)
        assert params.content == "hi"


class TestMultipartPayload:
    async def test_layout(self):
        params = CreateMessageParams(
            content="look",
            files=[
                FileParams(reader=io.BytesIO(b"PNGDATA"), filename="cat.png"),
                FileParams(reader=b"GIFDATA", filename="dog.gif"),
            ],
        )
        encoded = await encode_create_message(params)
        assert encoded.content_type.startswith("multipart/form-data; boundary=")

        parts = parse_multipart(encoded.body, encoded.content_type)
        assert [part_name(p) for p in parts] == ["payload_json", "file0", "file1"]
        assert json.loads(parts[0].get_payload(decode=True)) == {"content": "look"}
        assert parts[1].get_filename() == "cat.png"
        assert parts[1].get_payload(decode=True) == b"PNGDATA"
        assert parts[2].get_filename() == "dog.gif"
        assert parts[2].get_payload(decode=True) == b"GIFDATA"

    async def test_spoiler_all_attachments(self):
        params = CreateMessageParams(
            content="hi",
            files=[FileParams(reader=io.BytesIO(b"x"), filename="cat.png")],
            spoiler_tag_all_attachments=True,
        )
        encoded = await encode_create_message(params)
        parts = parse_multipart(encoded.body, encoded.content_type)
        assert parts[1].get_filename() == "SPOILER_cat.png"

    async def test_single_spoiler_file(self):
        params = CreateMessageParams(
            files=[
                FileParams(reader=b"a", filename="a.png", spoiler_tag=True),
                FileParams(reader=b"b", filename="b.png"),
            ],
        )
        encoded = await encode_create_message(params)
        parts = parse_multipart(encoded.body, encoded.content_type)
        assert parts[1].get_filename() == "SPOILER_a.png"
        assert parts[2].get_filename() == "b.png"

    async def test_prefix_not_doubled(self):
        params = CreateMessageParams(
            files=[FileParams(reader=b"a", filename="SPOILER_a.png", spoiler_tag=True)],
        )
        encoded = await encode_create_message(params)
        parts = parse_multipart(encoded.body, encoded.content_type)
        assert parts[1].get_filename() == "SPOILER_a.png"

    async def test_spoiler_content_in_payload_json(self):
        params = CreateMessageParams(
            content="secret",
            spoiler_tag_content=True,
            files=[FileParams(reader=b"a", filename="a.txt")],
        )
        encoded = await encode_create_message(params)
        parts = parse_multipart(encoded.body, encoded.content_type)
        assert json.loads(parts[0].get_payload(decode=True))["content"] == "|| secret ||"

    async def test_read_failure_is_encoding_error(self):
        params = CreateMessageParams(
            files=[FileParams(reader=_BrokenReader(), filename="a.txt")],
        )
        with pytest.raises(EncodingError, match="file0"):
            await encode_create_message(params)

    async def test_closed_stream_is_encoding_error(self):
        stream = io.BytesIO(b"data")
        stream.close()
        params = CreateMessageParams(files=[FileParams(reader=stream, filename="a.txt")])
        with pytest.raises(EncodingError):
            await encode_create_message(params)

    async def test_stream_read_off_event_loop(self):
        reader = _ThreadRecordingReader(b"payload bytes")
        params = CreateMessageParams(files=[FileParams(reader=reader, filename="a.bin")])
        encoded = await encode_create_message(params)
        assert reader.read_on is not None
        assert reader.read_on is not threading.current_thread()
        parts = parse_multipart(encoded.body, encoded.content_type)
        assert parts[1].get_payload(decode=True) == b"payload bytes"

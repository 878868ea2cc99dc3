"""Request body encoding for message creation: JSON or multipart with files."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from aiohttp import MultipartWriter

from cordial.errors import EncodingError
from cordial.models import ATTACHMENT_SPOILER_PREFIX
from cordial.params import CreateMessageParams, FileParams
from cordial.utils.logging import get_logger

log = get_logger(__name__)

CONTENT_TYPE_JSON = "application/json"
PAYLOAD_JSON_FIELD = "payload_json"


@dataclass
class EncodedPayload:
    body: bytes
    content_type: str


class _BufferWriter:
    """Minimal stream writer collecting a MultipartWriter's output in memory."""

    def __init__(self) -> None:
        self.buffer = bytearray()

    async def write(self, chunk: bytes) -> None:
        self.buffer.extend(chunk)


def spoiler_content(content: str) -> str:
    return f"|| {content} ||"


def spoiler_filename(filename: str) -> str:
    if filename.startswith(ATTACHMENT_SPOILER_PREFIX):
        return filename
    return ATTACHMENT_SPOILER_PREFIX + filename


def _prepared_filenames(params: CreateMessageParams) -> list[str]:
    names = []
    for f in params.files:
        if f.spoiler_tag or params.spoiler_tag_all_attachments:
            names.append(spoiler_filename(f.filename))
        else:
            names.append(f.filename)
    return names


async def _read_file(index: int, file: FileParams) -> bytes:
    if isinstance(file.reader, (bytes, bytearray, memoryview)):
        return bytes(file.reader)
    try:
        # Real streams may block on disk or pipe IO
        data = await asyncio.to_thread(file.reader.read)
    except (OSError, ValueError) as e:
        raise EncodingError(f"failed to read attachment file{index} ({file.filename!r}): {e}") from e
    if isinstance(data, str):
        raise EncodingError(f"attachment file{index} ({file.filename!r}) is not a binary stream")
    return bytes(data)


def json_document(params: CreateMessageParams) -> dict[str, Any]:
    """The JSON half of the payload, with content-level spoiler tagging applied."""
    doc = params.to_dict()
    if params.spoiler_tag_content and params.content:
        doc["content"] = spoiler_content(params.content)
    return doc


async def encode_create_message(params: CreateMessageParams) -> EncodedPayload:
    """Serialize a message draft for the create-message endpoint.

    Without files the draft is sent as plain JSON. With files the body is
    multipart/form-data: a ``payload_json`` field holding the JSON document,
    then one ``file<i>`` part per attachment. The caller's params object is
    not modified.
    """
    doc = json_document(params)
    payload_json = json.dumps(doc, separators=(",", ":"))

    if not params.files:
        return EncodedPayload(body=payload_json.encode("utf-8"), content_type=CONTENT_TYPE_JSON)

    writer = MultipartWriter("form-data")
    part = writer.append(payload_json)
    part.set_content_disposition("form-data", name=PAYLOAD_JSON_FIELD)

    for index, (file, filename) in enumerate(zip(params.files, _prepared_filenames(params))):
        data = await _read_file(index, file)
        part = writer.append(data)
        part.set_content_disposition("form-data", name=f"file{index}", filename=filename)

    out = _BufferWriter()
    await writer.write(out)
    log.debug("multipart_encoded", files=len(params.files), size=len(out.buffer))
    return EncodedPayload(body=bytes(out.buffer), content_type=writer.content_type)

"""REST operations on /channels/{channel.id}/messages.

Every operation validates its identifiers before building a request, so a
missing snowflake never reaches the transport. Transport failures propagate
unchanged; nothing here retries.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from cordial.core import endpoint, ratelimit
from cordial.core.payload import CONTENT_TYPE_JSON, encode_create_message
from cordial.core.ratelimit import MessageVerb
from cordial.errors import (
    DecodeError,
    MissingParamsError,
    MissingSnowflakeError,
    UnexpectedStatusError,
    ValidationError,
)
from cordial.message import Message
from cordial.params import (
    BulkDeleteMessagesParams,
    CreateMessageParams,
    EditMessageParams,
    GetMessagesParams,
)
from cordial.snowflake import Snowflake, is_empty
from cordial.transports.base import Deleter, Getter, Patcher, Poster, Request, Response
from cordial.utils.logging import get_logger

log = get_logger(__name__)


def _require(value: Snowflake | None, message: str) -> None:
    if is_empty(value):
        raise MissingSnowflakeError(message)


def _decode(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"response is not valid JSON: {e}") from e


def _expect_no_content(resp: Response) -> None:
    if resp.status_code != HTTPStatus.NO_CONTENT:
        raise UnexpectedStatusError(
            f"unexpected http response code. Got {resp.status}, wants {HTTPStatus.NO_CONTENT.phrase}",
            status_code=resp.status_code,
            reason=resp.reason,
        )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_channel_messages(
    client: Getter,
    channel_id: Snowflake,
    params: GetMessagesParams | None = None,
) -> list[Message]:
    """GET /channels/{channel.id}/messages

    Needs VIEW_CHANNEL; without READ_MESSAGE_HISTORY Discord returns an empty
    list.
    """
    _require(channel_id, "channel_id must be set to get channel messages")
    query = ""
    if params is not None:
        params.validate()
        query = params.query_string()

    resp = await client.get(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.LIST),
        endpoint=endpoint.channel_messages(channel_id) + query,
    ))

    data = _decode(resp.body)
    if not isinstance(data, list):
        raise DecodeError("expected a JSON array of messages")
    return [Message.from_dict(item) for item in data]


async def get_channel_message(
    client: Getter,
    channel_id: Snowflake,
    message_id: Snowflake,
) -> Message:
    """GET /channels/{channel.id}/messages/{message.id}"""
    _require(channel_id, "channel_id must be set to get a channel message")
    _require(message_id, "message_id must be set to get a specific message from a channel")

    resp = await client.get(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.FETCH),
        endpoint=endpoint.channel_message(channel_id, message_id),
    ))
    return Message.from_dict(_decode(resp.body))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def create_channel_message(
    client: Poster,
    channel_id: Snowflake,
    params: CreateMessageParams | None,
) -> Message:
    """POST /channels/{channel.id}/messages

    Sent as JSON, or as multipart/form-data when files are attached. The
    request may not exceed 8MB.
    """
    _require(channel_id, "channel_id must be set to create a channel message")
    if params is None:
        raise MissingParamsError("message must be set")

    payload = await encode_create_message(params)

    resp = await client.post(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.CREATE),
        endpoint=endpoint.channel_messages(channel_id),
        body=payload.body,
        content_type=payload.content_type,
    ))
    message = Message.from_dict(_decode(resp.body))
    log.info("message_created", channel_id=channel_id, message_id=message.id, files=len(params.files))
    return message


async def edit_message(
    client: Patcher,
    channel_id: Snowflake,
    message_id: Snowflake,
    params: EditMessageParams | None = None,
) -> Message:
    """PATCH /channels/{channel.id}/messages/{message.id}

    Only messages sent by the current user can be edited.
    """
    _require(channel_id, "channel_id must be set to edit a message")
    _require(message_id, "message_id must be set to edit the message")
    params = params or EditMessageParams()

    resp = await client.patch(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.EDIT),
        endpoint=endpoint.channel_message(channel_id, message_id),
        body=json.dumps(params.to_dict()).encode("utf-8"),
        content_type=CONTENT_TYPE_JSON,
    ))
    message = Message.from_dict(_decode(resp.body))
    log.info("message_edited", channel_id=channel_id, message_id=message_id)
    return message


# ---------------------------------------------------------------------------
# Deletes (separate rate-limit bucket)
# ---------------------------------------------------------------------------

async def delete_message(
    client: Deleter,
    channel_id: Snowflake,
    message_id: Snowflake,
) -> None:
    """DELETE /channels/{channel.id}/messages/{message.id}

    Deleting someone else's message needs MANAGE_MESSAGES.
    """
    _require(channel_id, "channel_id must be set to delete a message")
    _require(message_id, "message_id must be set to delete the message")

    resp = await client.delete(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.DELETE),
        endpoint=endpoint.channel_message(channel_id, message_id),
    ))
    _expect_no_content(resp)
    log.info("message_deleted", channel_id=channel_id, message_id=message_id)


async def bulk_delete_messages(
    client: Poster,
    channel_id: Snowflake,
    params: BulkDeleteMessagesParams | None,
) -> None:
    """POST /channels/{channel.id}/messages/bulk-delete

    Guild channels only, needs MANAGE_MESSAGES. Discord refuses the whole
    batch if any message is older than two weeks.
    """
    _require(channel_id, "channel_id must be set to bulk delete messages")
    if params is None:
        raise MissingParamsError("bulk delete params must be set")
    try:
        params.validate()
    except ValidationError as e:
        log.warning("bulk_delete_rejected", channel_id=channel_id, error=str(e))
        raise
    body = params.to_dict()

    resp = await client.post(Request(
        bucket=ratelimit.message_bucket(channel_id, MessageVerb.BULK_DELETE),
        endpoint=endpoint.channel_messages_bulk_delete(channel_id),
        body=json.dumps(body).encode("utf-8"),
        content_type=CONTENT_TYPE_JSON,
    ))
    _expect_no_content(resp)
    log.info("messages_bulk_deleted", channel_id=channel_id, count=len(body["messages"]))

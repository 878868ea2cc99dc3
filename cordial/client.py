"""Client facade binding the message operations to one transport."""

from __future__ import annotations

from cordial.config import Settings
from cordial.message import Message
from cordial.params import (
    BulkDeleteMessagesParams,
    CreateMessageParams,
    EditMessageParams,
    GetMessagesParams,
)
from cordial.resources import messages
from cordial.snowflake import Snowflake
from cordial.transports.base import Transport
from cordial.transports.http import HTTPTransport


class Client:
    """Satisfies MessageSender, MessageUpdater and MessageDeleter."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> Client:
        return cls(HTTPTransport(settings.http))

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def get_messages(
        self, channel_id: Snowflake, params: GetMessagesParams | None = None
    ) -> list[Message]:
        return await messages.get_channel_messages(self.transport, channel_id, params)

    async def get_message(self, channel_id: Snowflake, message_id: Snowflake) -> Message:
        return await messages.get_channel_message(self.transport, channel_id, message_id)

    async def create_channel_message(
        self, channel_id: Snowflake, params: CreateMessageParams
    ) -> Message:
        return await messages.create_channel_message(self.transport, channel_id, params)

    async def send_message(self, channel_id: Snowflake, content: str) -> Message:
        return await self.create_channel_message(
            channel_id, CreateMessageParams.from_string(content)
        )

    async def edit_message(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        params: EditMessageParams,
    ) -> Message:
        return await messages.edit_message(self.transport, channel_id, message_id, params)

    async def delete_message(self, channel_id: Snowflake, message_id: Snowflake) -> None:
        await messages.delete_message(self.transport, channel_id, message_id)

    async def bulk_delete_messages(
        self, channel_id: Snowflake, params: BulkDeleteMessagesParams
    ) -> None:
        await messages.bulk_delete_messages(self.transport, channel_id, params)

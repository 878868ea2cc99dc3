"""Tests for request parameter objects and the bulk-delete validator."""

import threading

import pytest

from cordial.errors import (
    MissingSnowflakeError,
    TooFewMessagesError,
    TooManyMessagesError,
    ValidationError,
)
from cordial.message import Message
from cordial.models import Embed
from cordial.params import (
    BulkDeleteMessagesParams,
    CreateMessageParams,
    EditMessageParams,
    GetMessagesParams,
)
from cordial.snowflake import Snowflake


def ids(n: int) -> list[Snowflake]:
    return [Snowflake(i + 1) for i in range(n)]


class TestBulkDeleteValidate:
    def test_one_is_too_few(self):
        with pytest.raises(TooFewMessagesError):
            BulkDeleteMessagesParams(messages=ids(1)).validate()

    def test_empty_is_too_few(self):
        with pytest.raises(TooFewMessagesError):
            BulkDeleteMessagesParams().validate()

    @pytest.mark.parametrize("n", [2, 100])
    def test_bounds_valid(self, n):
        BulkDeleteMessagesParams(messages=ids(n)).validate()

    def test_101_is_too_many(self):
        with pytest.raises(TooManyMessagesError):
            BulkDeleteMessagesParams(messages=ids(101)).validate()

    def test_errors_are_validation_errors(self):
        assert issubclass(TooFewMessagesError, ValidationError)
        assert issubclass(TooManyMessagesError, ValidationError)


class TestBulkDeleteAddMessage:
    def test_appends_id(self):
        params = BulkDeleteMessagesParams()
        params.add_message(Message(id=Snowflake(5), channel_id=Snowflake(1)))
        assert params.messages == [5]

    def test_keeps_duplicates(self):
        params = BulkDeleteMessagesParams()
        msg = Message(id=Snowflake(5), channel_id=Snowflake(1))
        params.add_message(msg)
        params.add_message(msg)
        assert params.messages == [5, 5]

    def test_refuses_101st(self):
        params = BulkDeleteMessagesParams(messages=ids(100))
        with pytest.raises(TooManyMessagesError):
            params.add_message(Message(id=Snowflake(999), channel_id=Snowflake(1)))
        assert len(params.messages) == 100

    def test_unpersisted_message_rejected(self):
        params = BulkDeleteMessagesParams()
        with pytest.raises(MissingSnowflakeError):
            params.add_message(Message(channel_id=Snowflake(1)))

    def test_concurrent_adds_never_exceed_max(self):
        params = BulkDeleteMessagesParams()
        rejected = []

        def add_many(offset):
            for i in range(40):
                try:
                    params.add_message(Message(id=Snowflake(offset + i + 1), channel_id=Snowflake(1)))
                except TooManyMessagesError:
                    rejected.append(offset + i)

        threads = [threading.Thread(target=add_many, args=(k * 1000,)) for k in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(params.messages) == 100
        assert len(rejected) == 60
        params.validate()

    def test_to_dict(self):
        params = BulkDeleteMessagesParams(messages=[Snowflake(10), Snowflake(20)])
        assert params.to_dict() == {"messages": ["10", "20"]}


class TestGetMessagesParams:
    def test_empty_query(self):
        assert GetMessagesParams().query_string() == ""

    def test_anchor_and_limit(self):
        params = GetMessagesParams(around=Snowflake(7), limit=5)
        assert params.query_string() == "?around=7&limit=5"

    def test_mutually_exclusive(self):
        with pytest.raises(ValidationError):
            GetMessagesParams(before=Snowflake(1), after=Snowflake(2)).validate()

    @pytest.mark.parametrize("limit", [0, 101, -3])
    def test_limit_range(self, limit):
        with pytest.raises(ValidationError):
            GetMessagesParams(limit=limit).validate()

    def test_valid(self):
        GetMessagesParams(after=Snowflake(3), limit=100).validate()


class TestCreateAndEditParams:
    def test_from_string(self):
        params = CreateMessageParams.from_string("hey")
        assert params.to_dict() == {"content": "hey"}

    def test_edit_omits_unset(self):
        assert EditMessageParams().to_dict() == {}
        assert EditMessageParams(embed=Embed(description="d")).to_dict() == {"embed": {"description": "d"}}

    def test_edit_allows_clearing_content(self):
        assert EditMessageParams(content="").to_dict() == {"content": ""}

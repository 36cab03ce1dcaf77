import pytest
from pydantic import BaseModel

from pagantic.exceptions import MalformedResponseError
from pagantic.serializer import FetchResponse, ResponseParser, record_id


class Account(BaseModel):
    id: str
    name: str


class TestResponseParser:
    """Test response shape validation."""

    def test_parse_valid_response(self):
        response = ResponseParser().parse({"total": 2, "list": [{"id": "a"}, {"id": "b"}]})

        assert isinstance(response, FetchResponse)
        assert response.total == 2
        assert response.records == [{"id": "a"}, {"id": "b"}]
        assert response.additional_data is None

    def test_parse_additional_data(self):
        response = ResponseParser().parse(
            {"total": 0, "list": [], "additionalData": {"sum": 10}}
        )
        assert response.additional_data == {"sum": 10}

    def test_extra_fields_ignored(self):
        response = ResponseParser().parse({"total": 0, "list": [], "debug": True})
        assert response.total == 0

    @pytest.mark.parametrize(
        "payload",
        [
            {"list": []},
            {"total": 3},
            {"total": "many", "list": []},
            {"total": 3, "list": "abc"},
        ],
    )
    def test_malformed_shapes(self, payload):
        with pytest.raises(MalformedResponseError) as exc_info:
            ResponseParser().parse(payload)
        assert exc_info.value.response is payload

    def test_non_mapping_payload(self):
        with pytest.raises(MalformedResponseError, match="mapping"):
            ResponseParser().parse("<html>")

    def test_records_validated_into_model(self):
        parser = ResponseParser(Account)

        response = parser.parse({"total": 1, "list": [{"id": "a", "name": "Acme"}]})

        assert response.records == [Account(id="a", name="Acme")]

    def test_invalid_record_is_malformed(self):
        with pytest.raises(MalformedResponseError, match="Account"):
            ResponseParser(Account).parse({"total": 1, "list": [{"id": "a"}]})

    def test_to_record_keeps_model_instances(self):
        account = Account(id="a", name="Acme")
        assert ResponseParser(Account).to_record(account) is account

    def test_to_record_without_model(self):
        item = {"id": "a"}
        assert ResponseParser().to_record(item) is item


class TestRecordId:
    def test_mapping(self):
        assert record_id({"id": "a"}) == "a"

    def test_object(self):
        assert record_id(Account(id="a", name="x")) == "a"

    def test_missing(self):
        assert record_id({"name": "x"}) is None
        assert record_id("a") is None

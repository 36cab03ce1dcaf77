import pytest
from pydantic import BaseModel

from pagantic.config import DEFAULT_MAX_SIZE, RecordSetOptions
from pagantic.exceptions import ConfigurationError


class Account(BaseModel):
    id: str
    name: str


def test_defaults():
    options = RecordSetOptions(name="Account")

    assert options.max_size == DEFAULT_MAX_SIZE == 20
    assert options.max_max_size == 0
    assert options.legacy_sort is False
    assert options.where == []
    assert options.resolved_url == "Account"


def test_url_overrides_name():
    options = RecordSetOptions(name="Account", url="Account/action/listLinked")
    assert options.resolved_url == "Account/action/listLinked"


@pytest.mark.parametrize("max_size", [0, -5])
def test_max_size_must_be_positive(max_size):
    with pytest.raises(ConfigurationError, match="max_size") as exc_info:
        RecordSetOptions(max_size=max_size)
    assert exc_info.value.option == "max_size"


def test_max_size_must_be_int():
    with pytest.raises(ConfigurationError):
        RecordSetOptions(max_size="20")  # type: ignore[arg-type]


def test_max_max_size_can_not_be_negative():
    with pytest.raises(ConfigurationError, match="max_max_size"):
        RecordSetOptions(max_max_size=-1)


def test_model_must_be_pydantic():
    RecordSetOptions(model=Account)

    with pytest.raises(ConfigurationError, match="model"):
        RecordSetOptions(model=dict)  # type: ignore[arg-type]


def test_where_function_must_be_callable():
    with pytest.raises(ConfigurationError, match="where_function"):
        RecordSetOptions(where_function="nope")  # type: ignore[arg-type]


def test_from_kwargs_accepts_sort_by_alias():
    options = RecordSetOptions.from_kwargs(name="Account", sort_by="name", order="desc")
    assert options.order_by == "name"


def test_from_kwargs_order_by_wins_over_alias():
    options = RecordSetOptions.from_kwargs(order_by="createdAt", sort_by="name")
    assert options.order_by == "createdAt"


def test_from_kwargs_rejects_unknown_options():
    with pytest.raises(ConfigurationError, match="Unknown record set option"):
        RecordSetOptions.from_kwargs(name="Account", page_size=10)

import pytest

from mbrtu.errors import (
    DataLenError,
    DataNullError,
    DataShortError,
    MbError,
    ParseFailError,
)
from mbrtu.protocol import Function


@pytest.mark.parametrize(
    ("error_class", "message"),
    [
        (ParseFailError, "格式解析失败"),
        (DataLenError, "响应数据长度不匹配"),
        (DataNullError, "数据为空"),
    ],
)
def test_all_errors_share_base(error_class, message):
    error = error_class()
    assert isinstance(error, MbError)
    assert str(error) == message


def test_data_short_shares_base():
    with pytest.raises(MbError) as info:
        Function.parse_request(b"\x01\x02")
    assert isinstance(info.value, DataShortError)
    assert info.value.length == 2
    assert "len is 2" in str(info.value)


def test_data_short_keeps_length():
    error = DataShortError(3)
    assert error.length == 3
    assert str(error).endswith("len is 3")


def test_messages():
    assert str(ParseFailError()) == "格式解析失败"
    assert str(DataLenError()) == "响应数据长度不匹配"
    assert str(DataNullError()) == "数据为空"


def test_can_be_caught_as_base():
    with pytest.raises(MbError) as info:
        Function.parse_response(b"\x01\x03")
    assert isinstance(info.value, DataShortError)
    assert info.value.length == 2


def test_length_mismatch_caught_as_base():
    with pytest.raises(MbError) as info:
        Function.parse_response(b"\x01\x03\x03\x00\x00\x00\x00")
    assert isinstance(info.value, DataLenError)
    assert str(info.value) == "响应数据长度不匹配"
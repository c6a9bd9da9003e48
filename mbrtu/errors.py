"""Errors raised while building or decoding Modbus RTU frames."""


class MbError(Exception):
    """Base class for every error raised by this package."""


class ParseFailError(MbError):
    """A frame could not be parsed."""

    def __init__(self) -> None:
        super().__init__("格式解析失败")


class DataShortError(MbError):
    """A frame is shorter than the smallest valid frame."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"响应数据太短:len is {length}")


class DataLenError(MbError):
    """The length announced by a frame does not match its content."""

    def __init__(self) -> None:
        super().__init__("响应数据长度不匹配")


class DataNullError(MbError):
    """A frame carries no data where some was expected."""

    def __init__(self) -> None:
        super().__init__("数据为空")
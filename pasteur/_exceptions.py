__all__ = ("PasteurError", "MalformedTimestamp")


class PasteurError(Exception): ...


class MalformedTimestamp(PasteurError, ValueError):
    def __init__(self, value: object, source: str) -> None:
        super().__init__(f"Could not parse {source} value {value!r} as an HTTP date.")
        self.value = value
        self.source = source

class URIPathFinderError(Exception):
    pass


class ConfigurationError(URIPathFinderError, ValueError):
    pass


class UnknownField(URIPathFinderError, KeyError):
    def __init__(self, view: str, field: str):
        super().__init__(f"{view} has no field {field!r}")


class KeySetError(URIPathFinderError):
    pass


class DuplicateKey(KeySetError, KeyError):
    def __init__(self, key: bytes):
        super().__init__(f"duplicate key {key!r}")
        self.key = key


class CapacityExceeded(KeySetError):
    def __init__(self, capacity: int):
        super().__init__(f"key set is full; capacity={capacity}")
        self.capacity = capacity

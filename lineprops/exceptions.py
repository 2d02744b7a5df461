__all__ = [
    "PropertiesError",
    "PropertyNotFoundError",
    "InvalidPropertyTypeError"
]


class PropertiesError(Exception):
    pass


class PropertyNotFoundError(PropertiesError, LookupError):
    """Raised when a properties file has no line for the requested key."""
    def __init__(self, key: str, file: str) -> None:
        self.key = key
        self.file = file
        super().__init__(f"Property {key} not found in configuration file {file}")


class InvalidPropertyTypeError(PropertiesError, ValueError):
    """Raised when a stored value cannot be parsed as the requested type."""
    def __init__(self, key: str, expected: type) -> None:
        self.key = key
        self.expected = expected
        super().__init__(f"Invalid property type, {key} is not an instance of {expected.__name__}")

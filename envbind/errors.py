"""Exceptions raised while building a schema or binding the environment."""

from __future__ import annotations


class EnvBindError(Exception):
    """Base exception for envbind errors."""

    pass


class StructuralError(EnvBindError):
    """Exception raised when a destination cannot be bound at all."""

    pass


class NotInstanceError(StructuralError):
    """Exception raised when a class is given where an instance is expected."""

    def __init__(self, where: str, kind: str) -> None:
        self.where = where
        self.kind = kind
        super().__init__(f"{where}:{kind} - must be instances")


class NotRecordError(StructuralError):
    """Exception raised when a destination is not a model or dataclass."""

    def __init__(self, where: str, kind: str) -> None:
        self.where = where
        self.kind = kind
        super().__init__(f"{where}:{kind} - must be records")


class UnsupportedFieldError(StructuralError):
    """Exception raised when a field type has no converter.

    Parameters
    ----------
    field
        Qualified field name, ``Owner.attribute``.
    type_name
        Printable name of the declared type.

    Examples
    --------
    >>> str(UnsupportedFieldError("Args.foo", "object"))
    'Args.foo: object - fields are not supported'
    """

    def __init__(self, field: str, type_name: str) -> None:
        self.field = field
        self.type_name = type_name
        super().__init__(f"{field}: {type_name} - fields are not supported")


class FieldNotWritableError(StructuralError):
    """Exception raised when a destination refuses attribute assignment."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{path}: field is not writable")


class TagError(EnvBindError):
    """Exception raised when field options are malformed.

    Attributes
    ----------
    field : str | None
        Qualified name of the field carrying the options, once known.

    Examples
    --------
    >>> str(SliceDefaultError().with_field("Args.ids"))
    'Args.ids: default values are not supported for slice fields'
    """

    field: str | None = None

    def with_field(self, field: str) -> TagError:
        """Attach the qualified field name and return the same exception."""
        self.field = field
        return self

    def __str__(self) -> str:
        """Return the message prefixed with the field name when known."""
        message = super().__str__()
        if self.field is None:
            return message
        return f"{self.field}: {message}"


class UnrecognizedTagError(TagError):
    """Exception raised for an unknown option key.

    Attributes
    ----------
    key : str
        The offending option key.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{key}-unrecognized tag")


class RequiredWithDefaultError(TagError):
    """Exception raised when ``required`` is combined with a default."""

    def __init__(self) -> None:
        super().__init__("'required' cannot be used when a default value is specified")


class SliceDefaultError(TagError):
    """Exception raised when a list field declares a default literal."""

    def __init__(self) -> None:
        super().__init__("default values are not supported for slice fields")


class ConversionError(EnvBindError):
    """Exception raised when a string cannot be converted to a field type.

    Parameters
    ----------
    message
        Error message, already naming the offending key.
    key
        Environment key (or slot name, for defaults) being converted. None
        when the failure happened below the binding engine.

    Attributes
    ----------
    key : str | None
        Environment key being converted.

    Examples
    --------
    >>> try:
    ...     raise ConversionError("error processing environment variable foo", key="foo")
    ... except ConversionError as e:
    ...     print(e.key)
    foo
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class FieldRequiredError(EnvBindError):
    """Exception raised when a required key is absent from the environment."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{key}: field is required")


class DefaultEncodingError(EnvBindError):
    """Exception raised when a preset value cannot be rendered as text."""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        super().__init__(f"{path}: error marshaling default value to string: {cause}")

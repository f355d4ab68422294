"""
Raw JSON holders and discriminated union containers.

A union container keeps one variant as the exact bytes it was built from or
received as, plus the discriminator tag read from the ``type`` key. Typed
access goes through a static VariantRegistry: the tag is checked before any
payload is decoded, so asking for the wrong variant never parses bytes into
the wrong shape.

Containers plug into pydantic, so they can be used as model fields
(``TaskEnvelope.task``, ``PublishEventsRequest.events``).
"""

import json
import logging
from typing import (
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterator,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel, GetCoreSchemaHandler
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, core_schema

from relayer_api.common.exceptions import (
    DecodeError,
    EmptyUnionError,
    EncodeError,
    TypeMismatchError,
    UnknownDiscriminatorError,
)
from relayer_api.common.logging import get_logger, log_with_context

logger = get_logger(__name__)

R = TypeVar("R", bound="RawJSON")
V = TypeVar("V", bound=BaseModel)

DISCRIMINATOR_FIELD = "type"


def _tag_value(tag: Any) -> Any:
    # str-based enums hash by member name, not by value
    return getattr(tag, "value", tag)


def dumps_compact(value: Any) -> bytes:
    """Encode a JSON-compatible value the same way pydantic's JSON mode does."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def encode_variant(variant: BaseModel) -> Dict[str, Any]:
    """Serialize a variant to a wire-key dict, omitting None values.

    Raises:
        EncodeError: If the variant cannot be serialized
    """
    try:
        return variant.model_dump(mode="json", by_alias=True, exclude_none=True)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError(
            f"failed to encode {type(variant).__name__}",
            cause=e,
            context={"variant": type(variant).__name__},
        ) from e


class RawJSON:
    """One JSON value stored as raw bytes.

    Decoding copies the bytes verbatim, so encoding a decoded value returns
    exactly what was received.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes = b""):
        self._raw = raw

    @property
    def raw(self) -> bytes:
        return self._raw

    def is_empty(self) -> bool:
        return not self._raw

    @classmethod
    def from_json(cls: Type[R], data: Union[str, bytes, bytearray]) -> R:
        """Decode from JSON text, keeping the bytes as received.

        Raises:
            DecodeError: If data is not valid JSON
        """
        try:
            raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
            value = json.loads(raw)
        except ValueError as e:
            raise DecodeError(
                f"{cls.__name__}: invalid JSON", cause=e
            ) from e
        return cls._from_decoded(raw, value)

    @classmethod
    def from_wire(cls: Type[R], value: Any) -> R:
        """Build a container from an already parsed JSON value."""
        try:
            raw = dumps_compact(value)
        except (TypeError, ValueError) as e:
            raise DecodeError(
                f"{cls.__name__}: value is not JSON-compatible", cause=e
            ) from e
        return cls._from_decoded(raw, value)

    @classmethod
    def _from_decoded(cls: Type[R], raw: bytes, value: Any) -> R:
        return cls(raw)

    def to_json(self) -> bytes:
        """Encode to JSON bytes. An empty value encodes as ``null``."""
        return self._raw or b"null"

    def to_wire(self) -> Any:
        """Return the stored value as parsed JSON (None when empty)."""
        if not self._raw:
            return None
        return json.loads(self._raw)

    @classmethod
    def _coerce(cls, value: Any) -> "RawJSON":
        if isinstance(value, cls):
            return value
        if value is None:
            raise DecodeError(f"{cls.__name__}: value is required, got null")
        return cls.from_wire(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_wire()
            ),
        )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw!r})"


class VariantRegistry(Generic[V]):
    """Closed, static mapping between discriminator tags and variant models.

    Each variant declares its tag as the default of its ``type`` literal
    field. Duplicate tags or duplicate classes are rejected at import time.
    """

    def __init__(self, family: str, *variants: Type[V]):
        self.family = family
        self._by_tag: Dict[str, Type[V]] = {}
        self._by_type: Dict[Type[V], str] = {}

        for variant in variants:
            field = variant.model_fields.get(DISCRIMINATOR_FIELD)
            if field is None or not isinstance(field.default, str):
                raise ValueError(
                    f"{variant.__name__} has no fixed '{DISCRIMINATOR_FIELD}' tag"
                )
            tag = field.default
            if tag in self._by_tag:
                raise ValueError(f"duplicate {family} tag: {tag}")
            if variant in self._by_type:
                raise ValueError(f"duplicate {family} variant: {variant.__name__}")
            self._by_tag[tag] = variant
            self._by_type[variant] = tag

    def tag_for(self, variant_type: Type[BaseModel]) -> str:
        """Return the fixed tag of a registered variant class.

        Raises:
            TypeMismatchError: If the class is not a variant of this family
        """
        try:
            return self._by_type[variant_type]  # type: ignore[index]
        except KeyError:
            raise TypeMismatchError(
                expected=f"{self.family} variant", actual=variant_type.__name__
            ) from None

    def variant_for(self, tag: str) -> Type[V]:
        """Return the variant class registered for a tag.

        Raises:
            UnknownDiscriminatorError: If the tag is not registered
        """
        tag = _tag_value(tag)
        try:
            return self._by_tag[tag]
        except KeyError:
            raise UnknownDiscriminatorError(tag) from None

    def tags(self) -> Tuple[str, ...]:
        return tuple(self._by_tag)

    def __contains__(self, tag: object) -> bool:
        return _tag_value(tag) in self._by_tag

    def __iter__(self) -> Iterator[Type[V]]:
        return iter(self._by_tag.values())

    def __len__(self) -> int:
        return len(self._by_tag)


class _DiscriminatorProbe(BaseModel):
    """Shadow record reading only the discriminator of a payload."""

    type: str = ""


class UnionContainer(RawJSON, Generic[V]):
    """Holds exactly one variant of a closed family plus its tag.

    Subclasses set ``registry``. A container is created with from_variant()
    or by decoding JSON, and changes afterwards only through merge_variant().
    merge_variant() is not synchronized; use one writer per instance.
    """

    __slots__ = ("_discriminator",)

    registry: ClassVar[VariantRegistry]

    def __init__(self, raw: bytes = b"", discriminator: str = ""):
        super().__init__(raw)
        self._discriminator = discriminator

    @classmethod
    def _from_decoded(cls, raw: bytes, value: Any) -> "UnionContainer":
        if value is None:
            return cls()
        if not isinstance(value, dict):
            raise DecodeError(
                f"{cls.__name__}: expected a JSON object, got {type(value).__name__}"
            )
        try:
            probe = _DiscriminatorProbe.model_validate_json(raw)
        except PydanticValidationError as e:
            raise DecodeError(
                f"{cls.__name__}: invalid '{DISCRIMINATOR_FIELD}' field", cause=e
            ) from e
        return cls(raw, probe.type)

    @classmethod
    def from_variant(cls, variant: V) -> "UnionContainer[V]":
        """Build a container holding ``variant``.

        Raises:
            TypeMismatchError: If variant does not belong to this family
            EncodeError: If variant cannot be serialized
        """
        tag = cls.registry.tag_for(type(variant))
        return cls(dumps_compact(encode_variant(variant)), tag)

    def discriminator(self) -> str:
        """Return the tag of the held variant.

        A decoded payload without a tag yields an empty string.

        Raises:
            EmptyUnionError: If no variant was ever set
        """
        if not self._raw:
            raise EmptyUnionError(f"{type(self).__name__} holds no variant")
        return self._discriminator

    def as_variant(self, variant_type: Type[V]) -> V:
        """Decode the held payload as ``variant_type``.

        Raises:
            TypeMismatchError: If the stored tag is not variant_type's tag
            EmptyUnionError: If no variant was ever set
            DecodeError: If the payload does not parse as variant_type
        """
        expected = self.registry.tag_for(variant_type)
        actual = self.discriminator()
        if actual != expected:
            raise TypeMismatchError(expected=expected, actual=actual)

        try:
            return variant_type.model_validate_json(
                self._raw, by_alias=True, by_name=False
            )
        except PydanticValidationError as e:
            raise DecodeError(
                f"payload does not parse as {variant_type.__name__}",
                cause=e,
                context={"discriminator": actual},
            ) from e

    def value_by_discriminator(self) -> V:
        """Decode the held payload as whichever variant its tag names.

        Raises:
            UnknownDiscriminatorError: If the tag is not registered
            EmptyUnionError: If no variant was ever set
            DecodeError: If the payload does not parse as that variant
        """
        variant_type = self.registry.variant_for(self.discriminator())
        return self.as_variant(variant_type)

    def merge_variant(self, variant: V) -> None:
        """Overlay ``variant``'s fields onto the stored payload.

        Keys present in the serialized variant replace stored keys; every
        other stored key is kept, including keys unknown to any variant.
        Merging onto an empty container is the same as from_variant().

        Raises:
            TypeMismatchError: If variant does not belong to this family
            EncodeError: If the stored payload is not a JSON object or the
                variant cannot be serialized
        """
        tag = self.registry.tag_for(type(variant))
        update = encode_variant(variant)

        merged: Dict[str, Any] = {}
        if self._raw:
            try:
                current = json.loads(self._raw)
            except ValueError as e:
                raise EncodeError(
                    "stored payload is not valid JSON", cause=e
                ) from e
            if not isinstance(current, dict):
                raise EncodeError(
                    f"stored payload is a JSON {type(current).__name__}, not an object"
                )
            merged = current

        merged.update(update)
        self._raw = dumps_compact(merged)
        self._discriminator = tag

        log_with_context(
            logger,
            logging.DEBUG,
            "Merged variant into union",
            discriminator=tag,
            merged_keys=len(update),
        )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._raw == other._raw and self._discriminator == other._discriminator
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self._raw:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}(type={self._discriminator!r}, raw={self._raw!r})"

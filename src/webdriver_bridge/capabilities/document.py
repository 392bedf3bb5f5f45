"""Capability documents sent during the new-session handshake."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    JsonValue,
    StrictStr,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from typing_extensions import TypeAliasType

from ..errors import InvalidCapabilities

PreferenceValue = TypeAliasType(
    "PreferenceValue",
    "Union[StrictBool, StrictInt, StrictFloat, StrictStr, Dict[str, PreferenceValue]]",
)


class WireModel(BaseModel):
    """Base for capability models: camelCase on the wire, absent fields omitted."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class VendorOptions(WireModel):
    """Typed options nested under a vendor extension key."""

    vendor_key: ClassVar[str] = ""


class PageLoadStrategy(str, enum.Enum):
    NORMAL = "normal"
    EAGER = "eager"
    NONE = "none"


class UnhandledPromptBehavior(str, enum.Enum):
    DISMISS = "dismiss"
    ACCEPT = "accept"
    DISMISS_AND_NOTIFY = "dismiss and notify"
    ACCEPT_AND_NOTIFY = "accept and notify"
    IGNORE = "ignore"


class ProxyType(str, enum.Enum):
    PAC = "pac"
    DIRECT = "direct"
    AUTODETECT = "autodetect"
    SYSTEM = "system"
    MANUAL = "manual"


class ProxyConfiguration(WireModel):
    proxy_type: ProxyType = Field(alias="proxyType")
    proxy_autoconfig_url: Optional[str] = Field(default=None, alias="proxyAutoconfigUrl")
    http_proxy: Optional[str] = Field(default=None, alias="httpProxy")
    ssl_proxy: Optional[str] = Field(default=None, alias="sslProxy")
    socks_proxy: Optional[str] = Field(default=None, alias="socksProxy")
    socks_version: Optional[int] = Field(default=None, alias="socksVersion")
    no_proxy: Optional[list[str]] = Field(default=None, alias="noProxy")


class Timeouts(WireModel):
    """Session timeouts in milliseconds."""

    script: Optional[int] = None
    page_load: Optional[int] = Field(default=None, alias="pageLoad")
    implicit: Optional[int] = None


class CapabilityDocument(WireModel):
    """Desired browser and session properties.

    Standard capabilities are plain fields. Vendor-specific options live in
    ``extensions``, keyed by their namespaced string (for example
    ``goog:chromeOptions``); each value is either a :class:`VendorOptions`
    model or a plain mapping and is encoded as a single nested object under
    its key.
    """

    browser_name: Optional[str] = Field(default=None, alias="browserName")
    browser_version: Optional[str] = Field(default=None, alias="browserVersion")
    platform_name: Optional[str] = Field(default=None, alias="platformName")
    accept_insecure_certs: Optional[bool] = Field(default=None, alias="acceptInsecureCerts")
    page_load_strategy: Optional[PageLoadStrategy] = Field(default=None, alias="pageLoadStrategy")
    proxy: Optional[ProxyConfiguration] = None
    timeouts: Optional[Timeouts] = None
    strict_file_interactability: Optional[bool] = Field(
        default=None, alias="strictFileInteractability"
    )
    unhandled_prompt_behavior: Optional[UnhandledPromptBehavior] = Field(
        default=None, alias="unhandledPromptBehavior"
    )
    extensions: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator("extensions")
    @classmethod
    def _check_extensions(cls, value: Dict[str, Any], info: ValidationInfo) -> Dict[str, Any]:
        extension_types = (info.context or {}).get("extension_types")
        if extension_types is None:
            extension_types = default_extension_types()
        return {
            key: _coerce_extension(key, options, extension_types)
            for key, options in value.items()
        }

    def extension(self, key: str) -> Any:
        return self.extensions.get(key)

    def set_extension(self, key: str, options: Union[VendorOptions, Mapping[str, Any]]) -> None:
        """Store ``options`` under ``key``.

        Mappings under a registered vendor key are decoded into its typed
        model; other mappings must hold JSON values only.
        """

        try:
            options = _coerce_extension(key, options, default_extension_types())
        except ValueError as exc:
            raise InvalidCapabilities(str(exc)) from exc
        self.extensions = {**self.extensions, key: options}

    def to_wire(self) -> dict[str, Any]:
        payload = super().to_wire()
        for key, options in self.extensions.items():
            payload[key] = _encode_extension(options)
        return payload

    @classmethod
    def from_wire(
        cls,
        data: Mapping[str, Any],
        extension_types: Optional[Mapping[str, Type[VendorOptions]]] = None,
    ) -> "CapabilityDocument":
        """Decode a wire-shaped capability object.

        Keys that are not standard capabilities are vendor extensions.
        Those listed in ``extension_types`` (Chrome by default) decode into
        their typed model; the rest stay plain mappings.
        """

        if not isinstance(data, Mapping):
            raise InvalidCapabilities("capabilities must be a JSON object")
        if extension_types is None:
            extension_types = default_extension_types()
        reserved = _standard_keys()
        standard = {key: value for key, value in data.items() if key in reserved}
        extensions = {key: value for key, value in data.items() if key not in reserved}
        try:
            return cls.model_validate(
                {**standard, "extensions": extensions},
                context={"extension_types": extension_types},
            )
        except ValidationError as exc:
            raise InvalidCapabilities(str(exc)) from exc


def default_extension_types() -> dict[str, Type[VendorOptions]]:
    from .chrome import ChromeOptions

    return {ChromeOptions.vendor_key: ChromeOptions}


_OPAQUE_EXTENSION = TypeAdapter(Dict[str, JsonValue])


def _coerce_extension(
    key: str,
    options: Any,
    extension_types: Mapping[str, Type[VendorOptions]],
) -> Any:
    """Return ``options`` in the form it is stored under ``key``."""

    if not key:
        raise ValueError("vendor extension keys must be non-empty")
    if key in _standard_keys():
        raise ValueError(f"vendor key {key!r} collides with a standard capability")
    model = extension_types.get(key)
    if isinstance(options, VendorOptions):
        if model is not None and not isinstance(options, model):
            raise ValueError(f"vendor extension {key!r} expects {model.__name__}")
        return options
    if not isinstance(options, Mapping):
        raise ValueError(f"vendor extension {key!r} must be an object")
    try:
        if model is not None:
            return model.model_validate(dict(options))
        # stored exactly as it is encoded, so decoding gives the same mapping
        return _strip_absent(_OPAQUE_EXTENSION.validate_python(dict(options)))
    except ValidationError as exc:
        raise ValueError(f"invalid {key!r} options: {exc}") from exc


def _standard_keys() -> set[str]:
    keys = set()
    for name, info in CapabilityDocument.model_fields.items():
        if name == "extensions":
            continue
        keys.add(info.alias or name)
    return keys


def _encode_extension(options: Any) -> Any:
    if isinstance(options, WireModel):
        return options.to_wire()
    return _strip_absent(options)


def _strip_absent(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(value, Mapping):
        return {str(k): _strip_absent(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_strip_absent(item) for item in value]
    return value

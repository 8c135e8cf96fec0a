"""
Backend configuration.

Connection defaults come from the standard Vault environment variables
(VAULT_ADDR, VAULT_TOKEN, VAULT_CACERT, ...) through pydantic-settings;
values from the configuration file take precedence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any, TypeVar

from pydantic_settings import BaseSettings, SettingsConfigDict

from hieravault.errors import ConfigInvalidError
from hieravault.models import OverrideFlag

DEFAULT_MOUNT = "secret"
DEFAULT_GENERATE_MIN_LENGTH = 8

E = TypeVar("E", bound=Enum)


class OverrideBehavior(StrEnum):
    """How the override parameter is interpreted."""

    NORMAL = "normal"
    FLAG = "flag"


class FieldParse(StrEnum):
    """How an extracted default field value is post-processed."""

    STRING = "string"
    JSON = "json"


class FieldBehavior(StrEnum):
    """When the default field is extracted instead of the whole record.

    IGNORE: extra fields are ignored; a missing field yields no answer.
    ONLY: extract only when the field is present and the only one.
    """

    IGNORE = "ignore"
    ONLY = "only"


class StoreSettings(BaseSettings):
    """Connection parameters handed to the Vault client."""

    model_config = SettingsConfigDict(env_prefix="VAULT_", extra="ignore")

    addr: str = "http://127.0.0.1:8200"
    token: str | None = None
    namespace: str | None = None
    cacert: str | None = None
    capath: str | None = None
    client_cert: str | None = None
    client_key: str | None = None
    skip_verify: bool = False
    ciphers: str | None = None
    timeout: int = 30

    def verify(self) -> bool | str:
        """Value for the client's ``verify`` argument."""
        if self.skip_verify:
            return False
        if self.cacert:
            return self.cacert
        if self.capath:
            return self.capath
        return True

    def cert(self) -> tuple[str, str] | str | None:
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return self.client_cert


def _coerce_enum(enum_cls: type[E], value: Any, setting: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(f"'{member.value}'" for member in enum_cls)
        raise ConfigInvalidError(
            f"invalid value for {setting}: '{value}', should be one of {allowed}",
            details={"setting": setting},
        ) from None


def _coerce_bool(value: Any, setting: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"yes", "true", "on"}:
        return True
    if isinstance(value, str) and value.lower() in {"no", "false", "off"}:
        return False
    raise ConfigInvalidError(
        f"invalid value for {setting}: '{value}', should be one of 'yes', 'no'",
        details={"setting": setting},
    )


def _parse_mounts(value: Any) -> tuple[str, ...]:
    # Only generic (key/value) mounts are supported.
    if isinstance(value, dict):
        value = value.get("generic", [DEFAULT_MOUNT])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not value:
        raise ConfigInvalidError(
            f"invalid value for mounts: '{value}', expected a non-empty list of mount paths",
            details={"setting": "mounts"},
        )
    return tuple(str(mount) for mount in value)


@dataclass(frozen=True)
class BackendConfig:
    """Validated, immutable backend configuration."""

    mounts: tuple[str, ...] = (DEFAULT_MOUNT,)
    use_hierarchy: bool = False
    override_behavior: OverrideBehavior = OverrideBehavior.NORMAL
    default_field: str | None = None
    default_field_parse: FieldParse = FieldParse.STRING
    default_field_behavior: FieldBehavior = FieldBehavior.IGNORE
    flag_default: OverrideFlag = OverrideFlag.VAULT
    generate_min_length: int = DEFAULT_GENERATE_MIN_LENGTH
    store: StoreSettings = field(default_factory=StoreSettings)

    def __post_init__(self) -> None:
        coerced = {
            "mounts": _parse_mounts(self.mounts),
            "use_hierarchy": _coerce_bool(self.use_hierarchy, "use_hierarchy"),
            "override_behavior": _coerce_enum(
                OverrideBehavior, self.override_behavior, "override_behavior"
            ),
            "default_field_parse": _coerce_enum(
                FieldParse, self.default_field_parse, "default_field_parse"
            ),
            "default_field_behavior": _coerce_enum(
                FieldBehavior, self.default_field_behavior, "default_field_behavior"
            ),
            "flag_default": _coerce_enum(OverrideFlag, self.flag_default, "flag_default"),
        }
        for name, value in coerced.items():
            object.__setattr__(self, name, value)

        if isinstance(self.generate_min_length, bool) or not isinstance(
            self.generate_min_length, int
        ) or self.generate_min_length < 0:
            raise ConfigInvalidError(
                f"invalid value for generate_min_length: '{self.generate_min_length}', "
                "expected a non-negative integer",
                details={"setting": "generate_min_length"},
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> BackendConfig:
        """Build from a configuration mapping (the ``vault:`` section).

        Missing or null settings fall back to defaults.
        """
        data = {k: v for k, v in (data or {}).items() if v is not None}

        store_values: dict[str, Any] = {}
        if "addr" in data:
            store_values["addr"] = data["addr"]
        if "token" in data:
            store_values["token"] = data["token"]
        if "namespace" in data:
            store_values["namespace"] = data["namespace"]
        if "ssl_pem_file" in data:
            store_values["client_cert"] = data["ssl_pem_file"]
        if "ssl_key_file" in data:
            store_values["client_key"] = data["ssl_key_file"]
        if "ssl_ca_cert" in data:
            store_values["cacert"] = data["ssl_ca_cert"]
        if "ssl_ca_path" in data:
            store_values["capath"] = data["ssl_ca_path"]
        if "ssl_verify" in data:
            store_values["skip_verify"] = not _coerce_bool(data["ssl_verify"], "ssl_verify")
        if "ssl_ciphers" in data:
            store_values["ciphers"] = data["ssl_ciphers"]
        if "timeout" in data:
            store_values["timeout"] = data["timeout"]

        return cls(
            mounts=data.get("mounts", (DEFAULT_MOUNT,)),
            use_hierarchy=data.get("use_hierarchy", False),
            override_behavior=data.get("override_behavior", OverrideBehavior.NORMAL),
            default_field=data.get("default_field"),
            default_field_parse=data.get("default_field_parse", FieldParse.STRING),
            default_field_behavior=data.get("default_field_behavior", FieldBehavior.IGNORE),
            flag_default=data.get("flag_default", OverrideFlag.VAULT),
            generate_min_length=data.get("generate_min_length", DEFAULT_GENERATE_MIN_LENGTH),
            store=StoreSettings(**store_values),
        )

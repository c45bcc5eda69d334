from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    SerializerFunctionWrapHandler,
    StrictInt,
    StrictStr,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

IDENTITY_FINGERPRINT = "identity"


class SarifModel(BaseModel):
    """Base for SARIF objects.

    Attribute names are snake_case and map to the camelCase SARIF keys. Keys the
    schema does not declare are kept as extras, and dumping with
    ``exclude_unset=True`` reproduces only the keys that were in the input, in
    the order they were read. Scalars are strictly typed so nothing is coerced.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    _key_order: list[str] | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_key_order(cls, data: Any, handler: ModelWrapValidatorHandler) -> Any:
        instance = handler(data)
        if isinstance(data, dict):
            instance._key_order = [str(key) for key in data]
        return instance

    @model_serializer(mode="wrap")
    def _restore_key_order(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not self._key_order or not isinstance(data, dict):
            return data
        ordered = {key: data[key] for key in self._key_order if key in data}
        ordered.update((key, value) for key, value in data.items() if key not in ordered)
        return ordered


class ShortDescription(SarifModel):
    text: StrictStr | None = None


class Rule(SarifModel):
    id: StrictStr | None = None
    name: StrictStr | None = None
    short_description: ShortDescription | None = None


class Driver(SarifModel):
    name: StrictStr | None = None
    semantic_version: StrictStr | None = None
    version: StrictStr | None = None
    rules: list[Rule] | None = None


class Tool(SarifModel):
    driver: Driver | None = None


class Message(SarifModel):
    text: StrictStr | None = None
    markdown: StrictStr | None = None
    arguments: list[StrictStr] | None = None


class ArtifactLocation(SarifModel):
    uri: StrictStr | None = None
    uri_base_id: StrictStr | None = None


class Region(SarifModel):
    start_line: StrictInt | None = None
    end_line: StrictInt | None = None
    start_column: StrictInt | None = None
    end_column: StrictInt | None = None


class PhysicalLocation(SarifModel):
    artifact_location: ArtifactLocation | None = None
    region: Region | None = None


class Location(SarifModel):
    physical_location: PhysicalLocation | None = None


class ThreadLocation(SarifModel):
    location: Location | None = None


class ThreadFlow(SarifModel):
    locations: list[ThreadLocation] | None = None


class CodeFlow(SarifModel):
    thread_flows: list[ThreadFlow] | None = None


# Property bags are free-form in SARIF, so their values are never validated.
class Properties(SarifModel):
    priority_score: Any = None
    priority_score_factors: Any = None
    is_autofixable: Any = None


class Result(SarifModel):
    rule_id: StrictStr | None = None
    rule_index: StrictInt | None = None
    level: StrictStr | None = None
    message: Message | None = None
    locations: list[Location] | None = None
    fingerprints: dict[str, StrictStr] | None = None
    code_flows: list[CodeFlow] | None = None
    properties: Properties | None = None

    @property
    def identity(self) -> str:
        return (self.fingerprints or {}).get(IDENTITY_FINGERPRINT, "")


class Run(SarifModel):
    tool: Tool | None = None
    results: list[Result] | None = None


class SarifReport(SarifModel):
    schema_uri: StrictStr | None = Field(default=None, alias="$schema")
    version: StrictStr | None = None
    runs: list[Run] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

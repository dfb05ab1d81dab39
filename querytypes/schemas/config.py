import json
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from querytypes.core.errors import ConfigError

DEFAULT_EMIT_TEMPLATES = {
    "sql": "{dir}/{name}.queries.ts",
    "ts": "{dir}/{name}.types.ts",
}

DEFAULT_SOURCE = "querytypes.sources.descriptor:DescriptorSource"


class TransformConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")

    mode: Literal["sql", "ts"] = Field(..., examples=["sql"])
    include: str = Field(..., examples=["**/*.sql"])
    emit_template: Optional[str] = None
    camel_case_column_names: Optional[bool] = None

    @field_validator("emit_template")
    @classmethod
    def _check_placeholders(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "{name}" not in value:
            raise ValueError("emitTemplate must contain the {name} placeholder")
        return value

    @property
    def output_template(self) -> str:
        return self.emit_template or DEFAULT_EMIT_TEMPLATES[self.mode]


class ParsedConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="forbid")

    src_dir: str
    transforms: List[TransformConfig] = Field(..., min_length=1)
    fail_on_error: bool = False
    camel_case_column_names: bool = False
    types_overrides: Dict[str, str] = Field(default_factory=dict)
    source: str = DEFAULT_SOURCE

    def camel_case_for(self, transform: TransformConfig) -> bool:
        if transform.camel_case_column_names is not None:
            return transform.camel_case_column_names
        return self.camel_case_column_names


def load_config(path) -> ParsedConfig:
    """
    Read and validate a config file.

    JSON is used for ``.json`` files, YAML for everything else.
    Raises ConfigError with the path and the underlying message.
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(config_path, f"cannot read config file: {e}") from e

    try:
        if config_path.suffix == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(config_path, f"invalid syntax: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(config_path, "top level must be a mapping")

    try:
        return ParsedConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(config_path, str(e)) from e

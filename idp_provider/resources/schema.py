from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from idp_provider.errors import ResourceValidationError

class FieldType(str, Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    SET = "set"

_PYTHON_TYPES = {
    FieldType.STRING: (str,),
    FieldType.INT: (int,),
    FieldType.BOOL: (bool,),
    FieldType.SET: (list, tuple, set, frozenset),
}

class FieldSchema(BaseModel):
    """
    Declarative description of one attribute of a resource.
    Set fields hold strings.
    """
    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    default: Any = None
    choices: Optional[Tuple[str, ...]] = None
    description: str = ""

    class Config:
        frozen = True

    def zero_value(self) -> Any:
        if self.type == FieldType.STRING:
            return ""
        if self.type == FieldType.INT:
            return 0
        if self.type == FieldType.BOOL:
            return False
        return []

    def check(self, key: str, value: Any) -> List[str]:
        if self.type == FieldType.INT and isinstance(value, bool):
            return [f"{key}: expected {self.type.value}, got bool"]
        if not isinstance(value, _PYTHON_TYPES[self.type]):
            return [f"{key}: expected {self.type.value}, got {type(value).__name__}"]

        if self.type == FieldType.SET:
            if not all(isinstance(v, str) for v in value):
                return [f"{key}: expected a set of strings"]
            return []

        if self.choices is not None and value not in self.choices:
            allowed = ", ".join(repr(c) for c in self.choices)
            return [f"{key}: expected one of [{allowed}], got {value!r}"]
        return []


def build_schema(base: Mapping[str, FieldSchema], extra: Mapping[str, FieldSchema]) -> Dict[str, FieldSchema]:
    """Merge a base descriptor map with resource specific fields; `extra` wins on conflict."""
    schema = dict(base)
    schema.update(extra)
    return schema


def validate_config(schema: Mapping[str, FieldSchema], config: Mapping[str, Any]) -> None:
    """
    Check a user declaration against its schema.

    Raises:
        ResourceValidationError: With every problem found, not just the first.
    """
    errors: List[str] = []

    for key in config:
        if key not in schema:
            errors.append(f"{key}: unsupported argument")

    for key, field in schema.items():
        value = config.get(key)
        if value is None:
            if field.required:
                errors.append(f"{key}: required argument is missing")
            continue
        if field.computed and not field.optional and not field.required:
            errors.append(f"{key}: computed attribute cannot be set")
            continue
        errors.extend(field.check(key, value))

    if errors:
        raise ResourceValidationError(errors)

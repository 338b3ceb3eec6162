"""
Tool declarations and function-calling payloads.

Wire shapes (camelCase on the wire, snake_case in Python):
- {"functionDeclarations": [{"name", "description", "parameters"}]}
- {"googleSearch": {}}      built-in search, no user schema
- {"codeExecution": {}}     built-in code execution
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import orjson
from pydantic import BaseModel, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import FunctionCallError, ValidationError


class PropertyDetails(BaseModel):
    property_type: str = Field(alias="type")
    description: str = ""
    enum_values: Optional[List[str]] = Field(None, alias="enum")
    items: Optional["PropertyDetails"] = None
    model_config = {"populate_by_name": True}

    @classmethod
    def string(cls, description: str) -> "PropertyDetails":
        return cls(property_type="STRING", description=description)

    @classmethod
    def number(cls, description: str) -> "PropertyDetails":
        return cls(property_type="NUMBER", description=description)

    @classmethod
    def integer(cls, description: str) -> "PropertyDetails":
        return cls(property_type="INTEGER", description=description)

    @classmethod
    def boolean(cls, description: str) -> "PropertyDetails":
        return cls(property_type="BOOLEAN", description=description)

    @classmethod
    def array(cls, description: str, items: "PropertyDetails") -> "PropertyDetails":
        return cls(property_type="ARRAY", description=description, items=items)

    @classmethod
    def enum_type(cls, description: str, enum_values: Iterable[str]) -> "PropertyDetails":
        return cls(property_type="STRING", description=description, enum_values=[str(v) for v in enum_values])


class FunctionParameters(BaseModel):
    param_type: str = Field("OBJECT", alias="type")
    properties: Dict[str, PropertyDetails] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    model_config = {"populate_by_name": True}

    @classmethod
    def object(cls) -> "FunctionParameters":
        return cls(param_type="OBJECT")

    def with_property(self, name: str, details: PropertyDetails, required: bool = False) -> "FunctionParameters":
        """Add (or replace) a property; returns self for chaining."""
        self.properties[name] = details
        if required and name not in self.required:
            self.required.append(name)
        return self


class FunctionDeclaration(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    parameters: Optional[FunctionParameters] = None
    model_config = {"populate_by_name": True}


class Tool(BaseModel):
    """
    A capability the model may invoke. Exactly one of the three variants is set.
    """
    function_declarations: Optional[List[FunctionDeclaration]] = Field(None, alias="functionDeclarations")
    search: Optional[Dict[str, Any]] = Field(None, alias="googleSearch")
    code_exec: Optional[Dict[str, Any]] = Field(None, alias="codeExecution")
    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> "Tool":
        variants = [self.function_declarations is not None, self.search is not None, self.code_exec is not None]
        if sum(variants) != 1:
            raise ValueError("A tool must declare exactly one of functionDeclarations, googleSearch, codeExecution")
        if self.function_declarations is not None and not self.function_declarations:
            raise ValueError("A function tool needs at least one function declaration")
        return self

    @classmethod
    def function(cls, declaration: FunctionDeclaration) -> "Tool":
        return cls(function_declarations=[declaration])

    @classmethod
    def with_functions(cls, declarations: Iterable[FunctionDeclaration]) -> "Tool":
        return cls(function_declarations=list(declarations))

    @classmethod
    def google_search(cls) -> "Tool":
        return cls(search={})

    @classmethod
    def code_execution(cls) -> "Tool":
        return cls(code_exec={})

    @property
    def kind(self) -> str:
        if self.function_declarations is not None:
            return "function"
        if self.search is not None:
            return "google_search"
        return "code_execution"


def _extract_property_details(value: Any) -> Optional[PropertyDetails]:
    if not isinstance(value, dict):
        return None

    property_type = str(value.get("type") or "string").upper()
    description = value.get("description") or ""

    enum_values = None
    if isinstance(value.get("enum"), list):
        enum_values = [v for v in value["enum"] if isinstance(v, str)]

    items = _extract_property_details(value.get("items"))

    return PropertyDetails(
        property_type=property_type,
        description=str(description),
        enum_values=enum_values,
        items=items,
    )


def value_to_function_parameters(value: Any) -> FunctionParameters:
    """
    Convert a JSON-schema style dict into FunctionParameters.

    Types are upper-cased (Gemini's OpenAPI subset), the top level defaults to
    OBJECT and properties default to STRING. Non-dict input yields an empty
    OBJECT schema.
    """
    if not isinstance(value, dict):
        return FunctionParameters.object()

    params = FunctionParameters(param_type=str(value.get("type") or "object").upper())

    required = value.get("required")
    if isinstance(required, list):
        params.required = [r for r in required if isinstance(r, str)]

    props = value.get("properties")
    if isinstance(props, dict):
        for key, prop in props.items():
            details = _extract_property_details(prop)
            if details is not None:
                params.properties[key] = details

    return params


class FunctionCall(BaseModel):
    """A function call requested by the model."""
    name: str
    args: Any = Field(default_factory=dict)
    id: Optional[str] = None
    model_config = {"populate_by_name": True}

    def get(self, key: str, type_: Any = None) -> Any:
        """
        Return one argument, optionally coerced to `type_` with pydantic.

        Raises FunctionCallError when the arguments are not an object, the key
        is missing, or the value cannot be coerced.
        """
        if not isinstance(self.args, dict):
            raise FunctionCallError("Arguments are not an object")
        if key not in self.args:
            raise FunctionCallError(f"Missing parameter: {key}")
        value = self.args[key]
        if type_ is None:
            return value
        try:
            return TypeAdapter(type_).validate_python(value)
        except PydanticValidationError as e:
            raise FunctionCallError(f"Error deserializing parameter {key}: {e}") from e


class FunctionResponse(BaseModel):
    """The result of running a function, sent back to the model."""
    name: str
    response: Dict[str, Any]
    id: Optional[str] = None
    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _wrap_non_object_response(cls, data: Any) -> Any:
        # the API only accepts an object here
        if isinstance(data, dict) and "response" in data and not isinstance(data["response"], dict):
            data = {**data, "response": {"result": data["response"]}}
        return data

    @classmethod
    def from_str(cls, name: str, response: str) -> "FunctionResponse":
        try:
            parsed = orjson.loads(response)
        except orjson.JSONDecodeError as e:
            raise ValidationError(f"Function response for '{name}' is not valid JSON: {e}") from e
        return cls(name=name, response=parsed)

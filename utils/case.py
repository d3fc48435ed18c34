"""
Key case conversion between the camelCase wire format and snake_case storage.
Uses Pydantic's alias_generators for consistency with schema validation.
"""
from typing import Any

from pydantic.alias_generators import to_camel


def dict_keys_to_camel(obj: Any) -> Any:
    """Recursively convert dict keys from snake_case to camelCase for API responses."""
    if isinstance(obj, dict):
        return {to_camel(k): dict_keys_to_camel(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [dict_keys_to_camel(x) for x in obj]
    return obj


def form_keys_to_camel(form_data: dict[str, Any]) -> dict[str, Any]:
    """camelCase the field names of a form draft.

    Only top-level keys are converted: nested maps such as serviceDocuments are
    keyed by opaque service ids that must survive untouched.
    """
    return {(to_camel(k) if "_" in k else k): v for k, v in form_data.items()}

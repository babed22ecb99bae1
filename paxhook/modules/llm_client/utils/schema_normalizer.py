import copy
from typing import Any

# Keywords Google's responseSchema rejects
_UNSUPPORTED_KEYS = ("additionalProperties", "minItems")
_BRANCH_KEYS = ("anyOf", "oneOf", "allOf")


def unwrap_envelope(schema: Any) -> Any:
    """{name, strict, schema: {...}} -> the inner schema; anything else unchanged."""
    if isinstance(schema, dict) and isinstance(schema.get("schema"), dict):
        return schema["schema"]
    return schema


def normalize_schema(schema: Any) -> Any:
    """
    Rewrites an OpenAI-style JSON schema into the dialect accepted by Google's
    structured output: scalar `type` plus `nullable`, and no
    additionalProperties/minItems. Works on a copy; never raises.
    """
    return _fix_node(copy.deepcopy(unwrap_envelope(schema)))


def _fix_node(node: Any) -> Any:
    if isinstance(node, list):
        for child in node:
            _fix_node(child)
        return node
    if not isinstance(node, dict):
        return node

    # type: ["object", "null"] -> type: "object", nullable: true
    types = node.get("type")
    if isinstance(types, list):
        non_null = [t for t in types if t != "null"]
        if "null" in types:
            node["nullable"] = True
        node["type"] = non_null[0] if non_null else "string"

    for key in _UNSUPPORTED_KEYS:
        node.pop(key, None)

    properties = node.get("properties")
    if isinstance(properties, dict):
        for child in properties.values():
            _fix_node(child)
    if "items" in node:
        _fix_node(node["items"])
    for key in _BRANCH_KEYS:
        if isinstance(node.get(key), list):
            _fix_node(node[key])
    return node

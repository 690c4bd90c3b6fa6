"""Human readable messages for request validation failures."""
from typing import Any, Dict, Iterable, List

MSG_INVALID_PAYLOAD = "unable to parse the request"


def _field_name(loc: Iterable[Any]) -> str:
    # Drop the "body"/"query" prefix and list indexes
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts)


def describe_error(error: Dict[str, Any]) -> str:
    loc = error.get("loc") or ()
    field = _field_name(loc)
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if loc and loc[0] in ("query", "path"):
        return f"invalid value for '{field}'"

    if kind in ("missing", "string_too_short"):
        return f"'{field}' is required"
    if kind in ("decimal_parsing", "decimal_type", "float_parsing", "float_type", "int_parsing", "int_type"):
        return f"'{field}' should have numeric value"
    if kind == "greater_than":
        return f"'{field}' should be greater than {ctx.get('gt')}"
    if kind == "greater_than_equal":
        return f"'{field}' should be greater than or equal to {ctx.get('ge')}"
    if kind == "value_error" and field:
        # Custom validators raise "should ..." messages
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        return f"'{field}' {message}"
    if field:
        return f"'{field}': {error.get('msg', 'invalid value')}"
    return MSG_INVALID_PAYLOAD


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Join all validation failures into one comma separated message."""
    if any(error.get("type") in ("json_invalid", "model_attributes_type", "model_type", "dict_type") for error in errors):
        return MSG_INVALID_PAYLOAD
    messages = list(dict.fromkeys(describe_error(error) for error in errors))
    return ",".join(messages)

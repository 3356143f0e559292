"""Model serialization for MCP responses."""

from typing import Any


def serialize_model(obj: Any) -> dict[str, Any]:
    """
    Serialize a SQLAlchemy model to dictionary.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        Dictionary representation of the model
    """
    if hasattr(obj, "__dict__"):
        result = {}
        for key, value in obj.__dict__.items():
            if key.startswith("_"):
                continue
            if hasattr(value, "isoformat"):  # datetime
                result[key] = value.isoformat()
            elif isinstance(value, list):
                result[key] = [
                    serialize_model(item) if hasattr(item, "__dict__") else item
                    for item in value
                ]
            else:
                result[key] = value
        return result
    return obj


def serialize_result(obj: Any) -> Any:
    """
    Serialize a core result (dataclass report, named tuple, or plain data).

    Args:
        obj: Value returned by a reconciler, converter, or validator call

    Returns:
        JSON-serializable representation
    """
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "_asdict"):
        return {key: serialize_result(value) for key, value in obj._asdict().items()}
    if isinstance(obj, list):
        return [serialize_result(item) for item in obj]
    return obj

from typing import Any, Optional


def ok(data: Any = None):
    """Standard success envelope. Pydantic models are dumped with their JSON field names."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(by_alias=True)
    elif isinstance(data, list):
        data = [item.model_dump(by_alias=True) if hasattr(item, "model_dump") else item for item in data]
    return {"ok": True, "data": data, "error": None}


def error(code: str = "internal_error", message: str = "An internal error occurred", details: Optional[Any] = None):
    """Standard error envelope."""
    body = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return {"ok": False, "data": None, "error": body}

"""Error types for weakassoc."""

from typing import Optional, Dict, Any, List


class WeakAssocError(Exception):
    """Base exception for weakassoc errors."""

    def __init__(self, message: str, code: str = "WEAKASSOC_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class SchemaLoadError(WeakAssocError):
    """Error reading or validating a schema document."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        details = {
            "source": source,
            "errors": errors or [],
        }
        super().__init__(message, code="SCHEMA_LOAD_ERROR", details=details)
        self.source = source
        self.errors = errors or []

    def get_user_friendly_message(self) -> str:
        """Return the message followed by one line per validation error."""
        lines = [self.message]
        for error in self.errors:
            location = ".".join(str(part) for part in error.get("loc", ()))
            if location:
                lines.append(f"  {location}: {error.get('msg', '')}")
            else:
                lines.append(f"  {error.get('msg', '')}")
        return "\n".join(lines)


class ConnectionError(WeakAssocError):
    """Error connecting to a database."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class IntrospectionError(WeakAssocError):
    """Error during database introspection."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INTROSPECTION_ERROR", details=details)

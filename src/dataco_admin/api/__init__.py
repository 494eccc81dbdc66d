from .client import ApiClient, parse_record, parse_records, unwrap
from .errors import ApiError, AuthRequiredError, ServerRejectedError, TransportError

__all__ = ["ApiClient", "parse_record", "parse_records", "unwrap", "ApiError", "AuthRequiredError", "ServerRejectedError", "TransportError"]

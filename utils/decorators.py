"""
Handler decorators for error handling, logging, and response formatting.
"""
import functools
import json
import uuid
from typing import Callable, Any, Dict, Optional, Tuple
from config import get_config
from logger_config import get_logger, log_access
from utils.exceptions import GatewayError

logger = get_logger(__name__)

CORS_ALLOW_METHODS = 'OPTIONS,GET,PUT,PATCH,DELETE'
CORS_ALLOW_HEADERS = 'Content-Type,X-Api-Key'

HandlerResult = Tuple[int, Optional[Dict[str, Any]]]


def build_response(
    status_code: int,
    body: Optional[Dict[str, Any]],
    allow_origin: str = '*',
    correlation_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build an API Gateway proxy response.

    Args:
        status_code: HTTP status code
        body: JSON-serializable body, or None for an empty body
        allow_origin: Value for Access-Control-Allow-Origin
        correlation_id: Request correlation id echoed in X-Correlation-Id

    Returns:
        Proxy integration response dictionary
    """
    headers = {
        'Content-Type': 'application/json',
        'Access-Control-Allow-Origin': allow_origin,
        'Access-Control-Allow-Methods': CORS_ALLOW_METHODS,
        'Access-Control-Allow-Headers': CORS_ALLOW_HEADERS,
    }
    if correlation_id:
        headers['X-Correlation-Id'] = correlation_id

    return {
        'statusCode': status_code,
        'headers': headers,
        'body': '' if body is None else json.dumps(body),
        'isBase64Encoded': False,
    }


def api_handler(
    func: Callable[[Dict[str, Any], Any], HandlerResult]
) -> Callable[[Dict[str, Any], Any], Dict[str, Any]]:
    """
    Decorator for API Gateway proxy Lambda handlers.

    The wrapped function returns a (status_code, body) tuple or raises a
    GatewayError. This decorator provides:
    - Request correlation IDs for logging
    - GatewayError to JSON response conversion
    - 500 responses for unexpected exceptions, with the traceback logged
    - One access-log line per request

    Args:
        func: The handler function to decorate

    Returns:
        Decorated handler function
    """
    @functools.wraps(func)
    def wrapper(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
        # Generate correlation ID for request tracking
        correlation_id = str(uuid.uuid4())
        request_id = getattr(context, 'aws_request_id', None) if context else None

        logger.info(
            f"Handler {func.__name__} invoked",
            extra={
                "correlation_id": correlation_id,
                "handler": func.__name__,
                "request_id": request_id
            }
        )

        allow_origin = '*'
        try:
            allow_origin = get_config().cors_allow_origin

            status_code, body = func(event, context)

            logger.info(
                f"Handler {func.__name__} completed with status {status_code}",
                extra={"correlation_id": correlation_id}
            )

        except GatewayError as e:
            status_code, body = e.status_code, e.to_body()

            log = logger.error if status_code >= 500 else logger.warning
            log(
                f"Handler {func.__name__} returned {status_code}: {e.message}",
                extra={"correlation_id": correlation_id}
            )

        except Exception as e:
            status_code = 500
            body = {"message": "Internal server error"}

            logger.error(
                f"Handler {func.__name__} failed: {str(e)}",
                extra={"correlation_id": correlation_id},
                exc_info=True
            )

        response = build_response(status_code, body, allow_origin, correlation_id)
        log_access(event, status_code, len(response['body']), correlation_id)
        return response

    return wrapper

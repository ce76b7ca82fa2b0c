"""
Lambda handler for the turnaround prompt record gateway.

Routes API Gateway proxy events (REST v1 and HTTP API v2) to the record
service:

  GET     /turnaroundprompt/{id}   read a live record
  PUT     /turnaroundprompt        create a record
  PATCH   /turnaroundprompt        update name and status
  DELETE  /turnaroundprompt/{id}   soft-delete a record
  OPTIONS *                        CORS preflight

Every route except OPTIONS requires a configured X-Api-Key.
"""
import hmac
import re
from typing import Any, Dict, Optional, Tuple
from urllib.parse import unquote

from config import Config, get_config
from logger_config import get_logger
from models import parse_json_body, validate_record_payload
from services.dynamodb_service import DynamoDBService
from services.record_service import RecordService
from utils.decorators import HandlerResult, api_handler
from utils.exceptions import (
    AuthenticationError,
    MethodNotAllowedError,
    RouteNotFoundError,
)

logger = get_logger(__name__)

RESOURCE = 'turnaroundprompt'
NOT_FOUND_MESSAGE = 'Item not found'

# Optional leading segment tolerates a stage prefix such as /prod
_RE_ROUTE = re.compile(
    r'^(?:/[^/]+)?/' + RESOURCE + r'(?:/(?P<id>[^/]+))?/?$'
)

_COLLECTION_METHODS = {'PUT', 'PATCH'}
_ITEM_METHODS = {'GET', 'DELETE'}

_record_service: Optional[RecordService] = None


def get_record_service() -> RecordService:
    """Return the process-wide record service, building it on first use."""
    global _record_service
    if _record_service is None:
        config = get_config()
        _record_service = RecordService(
            config.table_name,
            DynamoDBService(
                region_name=config.aws_region,
                endpoint_url=config.dynamodb_endpoint_url
            )
        )
    return _record_service


def _request_method(event: Dict[str, Any]) -> str:
    method = (
        (event.get('requestContext') or {}).get('http', {}).get('method')
        or event.get('httpMethod', '')
    )
    return method.upper()


def _resolve_route(event: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Match the request path.

    Returns:
        (is_item_route, record_id); record_id is None for the collection

    Raises:
        RouteNotFoundError: If the path is not a gateway route
    """
    path = event.get('rawPath') or event.get('path') or ''
    match = _RE_ROUTE.match(path)
    if not match:
        raise RouteNotFoundError()

    path_parameters = event.get('pathParameters') or {}
    record_id = path_parameters.get('id')
    if record_id is None and match.group('id') is not None:
        record_id = unquote(match.group('id'))

    return record_id is not None, record_id


def _header(event: Dict[str, Any], name: str) -> Optional[str]:
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def authenticate(event: Dict[str, Any], config: Config) -> None:
    """
    Check the X-Api-Key header against the configured keys.

    Raises:
        AuthenticationError: If the key is missing or unknown
    """
    if not config.api_key_required:
        return

    api_key = _header(event, 'X-Api-Key')
    if not api_key:
        logger.warning('Request rejected: missing X-Api-Key header')
        raise AuthenticationError()

    presented = api_key.encode('utf-8')
    if not any(hmac.compare_digest(presented, known.encode('utf-8')) for known in config.api_keys):
        logger.warning('Request rejected: unknown API key')
        raise AuthenticationError()


def get_record(record_id: str, service: RecordService) -> HandlerResult:
    record = service.get(record_id)
    if record is None:
        # Not-found reads answer 200 with a message body, not 404
        return 200, {'message': NOT_FOUND_MESSAGE}
    return 200, record.to_dict()


def create_record(event: Dict[str, Any], service: RecordService) -> HandlerResult:
    record = validate_record_payload(parse_json_body(event))
    created = service.create(record)
    return 201, created.to_dict()


def update_record(event: Dict[str, Any], service: RecordService) -> HandlerResult:
    record = validate_record_payload(parse_json_body(event))
    updated = service.update(record)
    return 200, updated.to_dict()


def delete_record(record_id: str, service: RecordService) -> HandlerResult:
    deleted = service.delete(record_id)
    return 200, {'id': deleted.id, 'deleted': deleted.deleted}


@api_handler
def route(event, context):
    """Lambda entrypoint for every gateway route."""
    method = _request_method(event)
    is_item, record_id = _resolve_route(event)

    if method == 'OPTIONS':
        return 204, None

    allowed = _ITEM_METHODS if is_item else _COLLECTION_METHODS
    if method not in allowed:
        raise MethodNotAllowedError()

    authenticate(event, get_config())
    service = get_record_service()

    if method == 'GET':
        return get_record(record_id, service)
    if method == 'DELETE':
        return delete_record(record_id, service)
    if method == 'PUT':
        return create_record(event, service)
    return update_record(event, service)

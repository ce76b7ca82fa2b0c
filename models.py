"""
Record model, request validation and DynamoDB marshalling.
"""
import base64
import binascii
import json
import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from utils.exceptions import ValidationError

RECORD_ID_PATTERN = re.compile(r'TAP-[0-9]+')
NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 255
VALID_STATUSES = ('active', 'inactive', 'pending', 'completed')
REQUIRED_FIELDS = ('id', 'name', 'status')

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


@dataclass
class Record:
    """A turnaround prompt record as stored in the table."""

    id: str
    name: str
    status: str
    deleted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_item(self) -> Dict[str, Dict[str, Any]]:
        """Serialize to DynamoDB attribute-value format."""
        return {key: _serializer.serialize(value) for key, value in self.to_dict().items()}

    @classmethod
    def from_item(cls, item: Dict[str, Dict[str, Any]]) -> "Record":
        """
        Deserialize from DynamoDB attribute-value format.

        A missing `deleted` attribute is read as True: only records explicitly
        flagged live are visible.
        """
        data = {key: _deserializer.deserialize(value) for key, value in item.items()}
        deleted = data.get('deleted')
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            status=data.get('status', ''),
            deleted=True if deleted is None else bool(deleted),
        )


def is_valid_record_id(record_id: Any) -> bool:
    return isinstance(record_id, str) and RECORD_ID_PATTERN.fullmatch(record_id) is not None


def validate_record_payload(payload: Any) -> Record:
    """
    Validate a PUT/PATCH body against the Record schema.

    Args:
        payload: Decoded JSON body

    Returns:
        Record with deleted=False; any client-supplied `deleted` is ignored

    Raises:
        ValidationError: With every violation listed in `errors`
    """
    if not isinstance(payload, dict):
        raise ValidationError(errors=['request body must be a JSON object'])

    errors: List[str] = []
    for field_name in REQUIRED_FIELDS:
        if field_name not in payload:
            errors.append(f"'{field_name}' is a required property")

    if 'id' in payload:
        record_id = payload['id']
        if not isinstance(record_id, str):
            errors.append("'id' must be a string")
        elif not is_valid_record_id(record_id):
            errors.append(f"'id' does not match pattern ^TAP-\\d+$: {record_id!r}")

    if 'name' in payload:
        name = payload['name']
        if not isinstance(name, str):
            errors.append("'name' must be a string")
        elif len(name) < NAME_MIN_LENGTH:
            errors.append("'name' must not be empty")
        elif len(name) > NAME_MAX_LENGTH:
            errors.append(f"'name' must be at most {NAME_MAX_LENGTH} characters")

    if 'status' in payload:
        status = payload['status']
        if not isinstance(status, str) or status not in VALID_STATUSES:
            errors.append(f"'status' must be one of {list(VALID_STATUSES)}")

    if errors:
        field = None
        if len(errors) == 1:
            match = re.match(r"'(\w+)'", errors[0])
            field = match.group(1) if match else None
        raise ValidationError(errors=errors, field=field)

    return Record(id=payload['id'], name=payload['name'], status=payload['status'])


def parse_json_body(event: Dict[str, Any]) -> Any:
    """
    Decode the JSON body of an API Gateway proxy event.

    Raises:
        ValidationError: If the body is missing or not valid JSON
    """
    raw: Optional[str] = event.get('body')
    if raw is None or raw == '':
        raise ValidationError(errors=['request body is required'])

    if event.get('isBase64Encoded'):
        try:
            raw = base64.b64decode(raw).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValidationError(errors=[f'request body is not valid base64: {str(e)}']) from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(errors=[f'request body is not valid JSON: {e.msg}']) from e

"""
Record service: conditional reads and writes for turnaround prompt records.

Each operation is a single DynamoDB call on a single item. Existence and
soft-delete checks are expressed as condition expressions so the store
decides atomically which of two racing writers wins; this service keeps no
state of its own and never retries.
"""
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from logger_config import get_logger
from models import Record
from utils.exceptions import (
    BackendError,
    ConflictError,
    GatewayError,
    InvalidRequestError,
    NotFoundError,
)
from .dynamodb_service import DynamoDBService, client_error_status, is_conditional_check_failed

logger = get_logger(__name__)

LIVE_RECORD_CONDITION = 'attribute_exists(#id) AND #deleted = :false'


class RecordService:
    """Service for turnaround prompt record operations."""

    def __init__(self, table_name: str, dynamodb_service: Optional[DynamoDBService] = None):
        """
        Initialize record service.

        Args:
            table_name: Name of the records DynamoDB table
            dynamodb_service: Client wrapper (a default one is created if None)
        """
        self.table_name = table_name
        self.dynamodb_service = dynamodb_service or DynamoDBService()

    @staticmethod
    def _key(record_id: str) -> dict:
        return {'id': {'S': record_id}}

    def _classify(
        self,
        error: Exception,
        operation: str,
        on_condition_failed: Optional[GatewayError] = None,
        client_errors_are_invalid: bool = False,
    ) -> GatewayError:
        """Map a store failure onto the gateway error the caller should see."""
        if on_condition_failed is not None and is_conditional_check_failed(error):
            return on_condition_failed

        status = client_error_status(error)
        error_code = None
        if isinstance(error, ClientError):
            error_code = error.response.get('Error', {}).get('Code')

        if client_errors_are_invalid and status is not None and 400 <= status < 500:
            logger.warning(f'{operation} rejected by store ({error_code}): {str(error)}')
            return InvalidRequestError()

        logger.error(f'{operation} failed ({error_code or type(error).__name__}): {str(error)}')
        return BackendError(operation=operation, error_code=error_code)

    def get(self, record_id: str) -> Optional[Record]:
        """
        Fetch a live record with a strongly consistent read.

        Returns:
            The record, or None if it is absent or soft-deleted

        Raises:
            InvalidRequestError: If the store rejects the key
            BackendError: On any other store failure
        """
        try:
            item = self.dynamodb_service.get_item(
                table_name=self.table_name,
                key=self._key(record_id),
                consistent_read=True
            )
        except (ClientError, BotoCoreError) as e:
            raise self._classify(e, 'GetItem', client_errors_are_invalid=True) from e

        if not item or 'id' not in item:
            return None

        record = Record.from_item(item)
        if record.deleted:
            logger.info(f'Record {record_id} is soft-deleted, reporting not found')
            return None
        return record

    def create(self, record: Record) -> Record:
        """
        Insert a new record, failing if the key exists in any state.

        Raises:
            ConflictError: If a record with the same id already exists
            InvalidRequestError: If the store rejects the item
            BackendError: On any other store failure
        """
        created = Record(id=record.id, name=record.name, status=record.status, deleted=False)
        try:
            self.dynamodb_service.put_item(
                table_name=self.table_name,
                item=created.to_item(),
                condition_expression='attribute_not_exists(#id)',
                expression_attribute_names={'#id': 'id'}
            )
        except (ClientError, BotoCoreError) as e:
            raise self._classify(
                e,
                'PutItem',
                on_condition_failed=ConflictError(record_id=record.id),
                client_errors_are_invalid=True
            ) from e

        logger.info(f'Created record {created.id}')
        return created

    def update(self, record: Record) -> Record:
        """
        Overwrite name and status of a live record.

        Returns:
            The record as stored after the update

        Raises:
            NotFoundError: If the record is absent or soft-deleted
            BackendError: On any other store failure
        """
        try:
            attributes = self.dynamodb_service.update_item(
                table_name=self.table_name,
                key=self._key(record.id),
                update_expression='SET #name = :name, #status = :status',
                condition_expression=LIVE_RECORD_CONDITION,
                expression_attribute_names={
                    '#id': 'id',
                    '#name': 'name',
                    '#status': 'status',
                    '#deleted': 'deleted'
                },
                expression_attribute_values={
                    ':name': {'S': record.name},
                    ':status': {'S': record.status},
                    ':false': {'BOOL': False}
                },
                return_values='ALL_NEW'
            )
        except (ClientError, BotoCoreError) as e:
            raise self._classify(
                e, 'UpdateItem', on_condition_failed=NotFoundError(record_id=record.id)
            ) from e

        logger.info(f'Updated record {record.id}')
        return Record.from_item(attributes)

    def delete(self, record_id: str) -> Record:
        """
        Soft-delete a live record by setting deleted = true.

        Returns:
            The record as stored after the update

        Raises:
            NotFoundError: If the record is absent or already soft-deleted
            BackendError: On any other store failure
        """
        try:
            attributes = self.dynamodb_service.update_item(
                table_name=self.table_name,
                key=self._key(record_id),
                update_expression='SET #deleted = :true',
                condition_expression=LIVE_RECORD_CONDITION,
                expression_attribute_names={'#id': 'id', '#deleted': 'deleted'},
                expression_attribute_values={
                    ':true': {'BOOL': True},
                    ':false': {'BOOL': False}
                },
                return_values='ALL_NEW'
            )
        except (ClientError, BotoCoreError) as e:
            raise self._classify(
                e, 'UpdateItem', on_condition_failed=NotFoundError(record_id=record_id)
            ) from e

        logger.info(f'Soft-deleted record {record_id}')
        return Record.from_item(attributes)

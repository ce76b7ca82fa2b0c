"""
DynamoDB service for table operations.
"""
import boto3
from typing import Dict, Any, Optional, TYPE_CHECKING
from botocore.exceptions import BotoCoreError, ClientError
from logger_config import get_logger

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient
else:
    DynamoDBClient = Any

logger = get_logger(__name__)


def _expression_kwargs(
    condition_expression: Optional[str],
    expression_attribute_names: Optional[Dict[str, str]],
    expression_attribute_values: Optional[Dict[str, Dict[str, Any]]],
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if condition_expression:
        kwargs['ConditionExpression'] = condition_expression
    if expression_attribute_names:
        kwargs['ExpressionAttributeNames'] = expression_attribute_names
    if expression_attribute_values:
        kwargs['ExpressionAttributeValues'] = expression_attribute_values
    return kwargs


class DynamoDBService:
    """Service for DynamoDB operations."""

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Initialize DynamoDB service.

        Args:
            region_name: AWS region for the client (boto3 default chain if None)
            endpoint_url: Override endpoint, e.g. DynamoDB Local
        """
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._client: Optional[DynamoDBClient] = None

    @property
    def client(self) -> DynamoDBClient:
        """Lazy initialization of DynamoDB client."""
        if self._client is None:
            kwargs: Dict[str, Any] = {}
            if self.region_name:
                kwargs['region_name'] = self.region_name
            if self.endpoint_url:
                kwargs['endpoint_url'] = self.endpoint_url
            self._client = boto3.client('dynamodb', **kwargs)
        return self._client

    def get_item(
        self,
        table_name: str,
        key: Dict[str, Dict[str, Any]],
        consistent_read: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item from DynamoDB table.

        Args:
            table_name: Name of the DynamoDB table
            key: Dictionary with attribute names and values in DynamoDB format
            consistent_read: Use a strongly consistent read

        Returns:
            Item dictionary if found, None otherwise

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.client.get_item(
                TableName=table_name,
                Key=key,
                ConsistentRead=consistent_read
            )
            return response.get('Item')
        except (ClientError, BotoCoreError) as e:
            logger.error(f'DynamoDB get_item failed for table {table_name}: {str(e)}')
            raise

    def put_item(
        self,
        table_name: str,
        item: Dict[str, Dict[str, Any]],
        condition_expression: Optional[str] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        expression_attribute_values: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> None:
        """
        Put an item into DynamoDB table.

        Args:
            table_name: Name of the DynamoDB table
            item: Item dictionary in DynamoDB format
            condition_expression: Optional condition the write is gated on
            expression_attribute_names: Placeholders for attribute names
            expression_attribute_values: Placeholders for attribute values

        Raises:
            ClientError: If DynamoDB operation fails, including
                ConditionalCheckFailedException
        """
        try:
            self.client.put_item(
                TableName=table_name,
                Item=item,
                **_expression_kwargs(
                    condition_expression,
                    expression_attribute_names,
                    expression_attribute_values
                )
            )
            logger.info(f'Successfully put item to DynamoDB table {table_name}')
        except (ClientError, BotoCoreError) as e:
            # Failed conditions are expected traffic, not operational errors
            if is_conditional_check_failed(e):
                logger.info(f'DynamoDB put_item condition failed for table {table_name}')
            else:
                logger.error(f'DynamoDB put_item failed for table {table_name}: {str(e)}')
            raise

    def update_item(
        self,
        table_name: str,
        key: Dict[str, Dict[str, Any]],
        update_expression: str,
        condition_expression: Optional[str] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        expression_attribute_values: Optional[Dict[str, Dict[str, Any]]] = None,
        return_values: str = 'ALL_NEW'
    ) -> Dict[str, Any]:
        """
        Update an item in DynamoDB table.

        Args:
            table_name: Name of the DynamoDB table
            key: Primary key in DynamoDB format
            update_expression: SET/REMOVE expression to apply
            condition_expression: Optional condition the write is gated on
            expression_attribute_names: Placeholders for attribute names
            expression_attribute_values: Placeholders for attribute values
            return_values: Which attributes DynamoDB returns

        Returns:
            The returned attributes in DynamoDB format (empty if none)

        Raises:
            ClientError: If DynamoDB operation fails, including
                ConditionalCheckFailedException
        """
        try:
            response = self.client.update_item(
                TableName=table_name,
                Key=key,
                UpdateExpression=update_expression,
                ReturnValues=return_values,
                **_expression_kwargs(
                    condition_expression,
                    expression_attribute_names,
                    expression_attribute_values
                )
            )
            logger.info(f'Successfully updated item in DynamoDB table {table_name}')
            return response.get('Attributes', {})
        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failed(e):
                logger.info(f'DynamoDB update_item condition failed for table {table_name}')
            else:
                logger.error(f'DynamoDB update_item failed for table {table_name}: {str(e)}')
            raise


def is_conditional_check_failed(exc: Exception) -> bool:
    """Return True if exc is DynamoDB's failed-condition signal."""
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def client_error_status(exc: Exception) -> Optional[int]:
    """Return the HTTP status DynamoDB answered with, if exc carries one."""
    if not isinstance(exc, ClientError):
        return None
    return exc.response.get('ResponseMetadata', {}).get('HTTPStatusCode')

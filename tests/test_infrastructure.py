"""
Tests for the records table shape the gateway expects.
"""
import pytest

from conftest import TABLE_NAME


@pytest.mark.infrastructure
def test_records_table_schema(dynamodb_client):
    """The records table is keyed by a string id with on-demand billing."""
    response = dynamodb_client.describe_table(TableName=TABLE_NAME)
    table = response['Table']

    assert table['TableName'] == 'TurnaroundPrompt'
    assert table['BillingModeSummary']['BillingMode'] == 'PAY_PER_REQUEST'
    assert table['KeySchema'] == [{'AttributeName': 'id', 'KeyType': 'HASH'}]
    assert table['AttributeDefinitions'] == [{'AttributeName': 'id', 'AttributeType': 'S'}]


@pytest.mark.infrastructure
def test_conditional_create_signal(dynamodb_client):
    """A second attribute_not_exists put fails with ConditionalCheckFailedException."""
    item = {'id': {'S': 'TAP-1'}, 'name': {'S': 'a'}, 'status': {'S': 'active'}, 'deleted': {'BOOL': False}}
    dynamodb_client.put_item(
        TableName=TABLE_NAME,
        Item=item,
        ConditionExpression='attribute_not_exists(#id)',
        ExpressionAttributeNames={'#id': 'id'}
    )

    with pytest.raises(Exception) as exc_info:
        dynamodb_client.put_item(
            TableName=TABLE_NAME,
            Item=item,
            ConditionExpression='attribute_not_exists(#id)',
            ExpressionAttributeNames={'#id': 'id'}
        )

    assert 'ConditionalCheckFailedException' in str(exc_info.value)

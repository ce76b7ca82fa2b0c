"""
Shared fixtures for the record gateway tests.
"""
import base64
import json

import boto3
import pytest
from moto import mock_aws

import config
import handler

TABLE_NAME = 'TurnaroundPrompt'
API_KEY = 'test-api-key'


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch):
    """Fake credentials and gateway settings for every test."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.setenv('AWS_REGION', 'us-east-1')
    monkeypatch.setenv('TABLE_NAME', TABLE_NAME)
    monkeypatch.setenv('API_KEYS', f'{API_KEY},admin-key')
    monkeypatch.delenv('DYNAMODB_ENDPOINT_URL', raising=False)
    monkeypatch.delenv('API_KEY_REQUIRED', raising=False)
    monkeypatch.delenv('CORS_ALLOW_ORIGIN', raising=False)

    # Cached singletons must be rebuilt from the patched environment
    config._config = None
    handler._record_service = None
    yield
    config._config = None
    handler._record_service = None


def create_records_table(client, table_name=TABLE_NAME):
    client.create_table(
        TableName=table_name,
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'S'}
        ],
        KeySchema=[
            {'AttributeName': 'id', 'KeyType': 'HASH'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def dynamodb_client():
    """A moto-backed DynamoDB client with the records table created."""
    with mock_aws():
        client = boto3.client('dynamodb', region_name='us-east-1')
        create_records_table(client)
        yield client


@pytest.fixture
def mock_context():
    """Mock Lambda context."""
    class MockContext:
        def __init__(self):
            self.function_name = 'turnaround-prompt-gateway'
            self.memory_limit_in_mb = 128
            self.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:gateway'
            self.aws_request_id = 'test-request-id'

    return MockContext()


def make_event(method, path, body=None, api_key=API_KEY, headers=None, base64_body=False):
    """Build an HTTP API (payload v2) proxy event."""
    event_headers = {'content-type': 'application/json'}
    if api_key is not None:
        event_headers['x-api-key'] = api_key
    event_headers.update(headers or {})

    raw_body = None
    if body is not None:
        raw_body = body if isinstance(body, str) else json.dumps(body)
        if base64_body:
            raw_body = base64.b64encode(raw_body.encode('utf-8')).decode('ascii')

    return {
        'version': '2.0',
        'rawPath': path,
        'headers': event_headers,
        'requestContext': {
            'requestId': 'req-123',
            'time': '19/Oct/2026:10:00:00 +0000',
            'http': {
                'method': method,
                'path': path,
                'protocol': 'HTTP/1.1',
                'sourceIp': '203.0.113.7',
            },
        },
        'body': raw_body,
        'isBase64Encoded': base64_body,
    }


def make_rest_event(method, resource, path, path_parameters=None, body=None, api_key=API_KEY):
    """Build a REST API (payload v1) proxy event."""
    headers = {'Content-Type': 'application/json'}
    if api_key is not None:
        headers['X-Api-Key'] = api_key
    return {
        'resource': resource,
        'path': path,
        'httpMethod': method,
        'headers': headers,
        'pathParameters': path_parameters,
        'requestContext': {
            'requestId': 'rest-req-1',
            'resourcePath': resource,
            'requestTime': '19/Oct/2026:10:00:00 +0000',
            'protocol': 'HTTP/1.1',
            'identity': {'sourceIp': '198.51.100.1', 'caller': None, 'user': None},
        },
        'body': None if body is None else json.dumps(body),
        'isBase64Encoded': False,
    }

"""
Service layer for DynamoDB access and record operations.

This module separates the conditional-write logic for records from the
HTTP handler and from the raw boto3 client.
"""

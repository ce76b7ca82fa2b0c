"""
Logging configuration for the record gateway Lambda.

This module provides a standardized logging setup that works well with
AWS Lambda and CloudWatch Logs, plus a JSON access-log line per request.
"""
import json
import logging
import os
import sys
from typing import Any, Dict, Optional

ACCESS_LOGGER_NAME = "record_gateway.access"


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured logger instance for AWS Lambda.

    Args:
        name: Logger name (defaults to this module's name if not provided)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Lambda sends stdout/stderr to CloudWatch
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    return logger


def _get_access_logger() -> logging.Logger:
    logger = logging.getLogger(ACCESS_LOGGER_NAME)
    if logger.handlers:
        return logger

    # Access lines are always emitted; they are the stage's request log
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_access_record(
    event: Dict[str, Any],
    status: int,
    response_length: int,
) -> Dict[str, Any]:
    """
    Build the access-log fields for one API Gateway proxy request.

    Works for both REST (v1) and HTTP API (v2) proxy events; missing
    fields are reported as None.
    """
    request_context = event.get('requestContext') or {}
    identity = request_context.get('identity') or {}
    http = request_context.get('http') or {}

    return {
        'requestId': request_context.get('requestId'),
        'ip': identity.get('sourceIp') or http.get('sourceIp'),
        'caller': identity.get('caller'),
        'user': identity.get('user'),
        'requestTime': request_context.get('requestTime') or request_context.get('time'),
        'httpMethod': event.get('httpMethod') or http.get('method'),
        'resourcePath': request_context.get('resourcePath') or event.get('rawPath') or event.get('path'),
        'status': status,
        'protocol': request_context.get('protocol') or http.get('protocol'),
        'responseLength': response_length,
    }


def log_access(
    event: Dict[str, Any],
    status: int,
    response_length: int,
    correlation_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Emit one JSON access-log line for a handled request.

    Returns:
        The record that was logged
    """
    record = build_access_record(event, status, response_length)
    if correlation_id:
        record['correlationId'] = correlation_id
    _get_access_logger().info(json.dumps(record, default=str))
    return record

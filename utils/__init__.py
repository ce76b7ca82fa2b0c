"""
Shared helpers for the Lambda handler: exceptions and decorators.
"""

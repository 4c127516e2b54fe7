"""
Core logic module.

Contains the schema migration run by the Lambda function.
"""

"""
Serverless image recognition: label detection for uploaded images behind a
Cognito-protected API.
"""
__version__ = "1.0.0"

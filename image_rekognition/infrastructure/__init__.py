"""
Infrastructure layer: logging, event parsing, Lambda handlers, local
resource setup and the CDK stack.
"""

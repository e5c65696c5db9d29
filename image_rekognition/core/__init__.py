"""
Domain layer: models, ports, services and use cases. Free of AWS SDK imports.
"""

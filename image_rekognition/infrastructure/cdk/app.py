#!/usr/bin/env python3
"""
CDK application entry point.

    cdk synth
    STACK_ALLOWED_IP_RANGES='["203.0.113.0/24"]' cdk deploy
"""
import aws_cdk as cdk

from image_rekognition.config.stack_settings import stack_settings
from image_rekognition.infrastructure.cdk.stack import ImageRekognitionStack


def main() -> None:
    app = cdk.App()
    stack_name = app.node.try_get_context("stack_name") or stack_settings.stack_name
    ImageRekognitionStack(app, stack_name, settings=stack_settings)
    app.synth()


if __name__ == "__main__":
    main()

"""
Test lazy AWS client creation without touching the network.
"""
from unittest.mock import patch

import pytest

from image_rekognition.config.aws_config import AWSConfig


@pytest.mark.unit
def test_clients_are_created_once():
    config = AWSConfig()
    with patch("image_rekognition.config.aws_config.boto3") as mock_boto3:
        first = config.rekognition_client
        second = config.rekognition_client
        assert first is second
        mock_boto3.client.assert_called_once()
        assert mock_boto3.client.call_args.args == ('rekognition',)


@pytest.mark.unit
@pytest.mark.parametrize("attribute, service", [
    ("sqs_client", "sqs"),
    ("cognito_client", "cognito-idp"),
    ("cognito_identity_client", "cognito-identity"),
])
def test_service_clients(attribute, service):
    with patch("image_rekognition.config.aws_config.boto3") as mock_boto3:
        getattr(AWSConfig(), attribute)
        assert mock_boto3.client.call_args.args == (service,)


@pytest.mark.unit
def test_retry_configuration():
    config = AWSConfig()
    assert config._boto_config.retries == {'max_attempts': 3, 'mode': 'adaptive'}
    assert config._boto_config.region_name == 'us-east-1'


@pytest.mark.unit
def test_table_reference_defaults_to_contract():
    with patch("image_rekognition.config.aws_config.boto3") as mock_boto3:
        AWSConfig().get_table()
        mock_boto3.resource.return_value.Table.assert_called_once_with("image-labels-test")

"""
botocore error classification shared by the AWS adapters.
"""
from botocore.exceptions import ClientError

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound", "InvalidS3ObjectException"}


def error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', '')


def error_message(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Message', str(error))


def is_not_found(error: ClientError) -> bool:
    return error_code(error) in NOT_FOUND_CODES


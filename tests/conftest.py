"""
Shared fixtures for the cloud call tests.
"""
import io
import os
from unittest.mock import Mock, patch

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

TEST_REGION = "us-east-1"


def make_client_error(code, operation, message="failed", status=400, request_id="req-0001"):
    """Build a botocore ClientError the way a service would raise it."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"RequestId": request_id, "HTTPStatusCode": status},
        },
        operation,
    )


@pytest.fixture
def aws_credentials():
    """Fake credentials so no call can reach a real account."""
    with patch.dict(os.environ, {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": TEST_REGION,
    }):
        yield


@pytest.fixture
def aws(aws_credentials):
    with mock_aws():
        yield


@pytest.fixture
def cloudwatch(aws):
    return boto3.client("cloudwatch", region_name=TEST_REGION)


@pytest.fixture
def s3(aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def kms(aws):
    return boto3.client("kms", region_name=TEST_REGION)


@pytest.fixture
def encrypted_object(s3, kms):
    """Store a KMS ciphertext of b'hello' in S3; returns (bucket, key)."""
    key_id = kms.create_key(Description="test key")["KeyMetadata"]["KeyId"]
    blob = kms.encrypt(KeyId=key_id, Plaintext=b"hello")["CiphertextBlob"]
    s3.create_bucket(Bucket="test-bucket")
    s3.put_object(Bucket="test-bucket", Key="secret.bin", Body=blob)
    return "test-bucket", "secret.bin"


@pytest.fixture
def mock_s3_client():
    """S3 client double returning the bytes 01 02 03."""
    client = Mock()
    client.get_object.return_value = {"Body": io.BytesIO(bytes([0x01, 0x02, 0x03]))}
    return client


@pytest.fixture
def mock_kms_client():
    client = Mock()
    client.decrypt.return_value = {"Plaintext": b"hello", "KeyId": "test-key"}
    return client

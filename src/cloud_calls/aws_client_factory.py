"""
Simple AWS client factory using direct boto3 clients.
"""
import os
from typing import Optional

import boto3
from botocore.config import Config

DEFAULT_REGION = "us-east-1"


def get_aws_region() -> str:
    """Get AWS region from environment."""
    return (
        os.environ.get("AWS_REGION")
        or os.environ.get("REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
        or DEFAULT_REGION
    )


def get_boto3_config(region: Optional[str] = None) -> Config:
    """Get standard boto3 configuration with SigV4 signing."""
    return Config(
        region_name=region or get_aws_region(),
        signature_version='v4'
    )


def get_aws_client(service_name: str, region: Optional[str] = None):
    """Get AWS client with standard boto3."""
    region = region or get_aws_region()
    return boto3.client(
        service_name,
        region_name=region,
        config=get_boto3_config(region)
    )


def get_cloudwatch_client(region: Optional[str] = None):
    """CloudWatch client for alarm operations."""
    return get_aws_client("cloudwatch", region)


def get_s3_client(region: Optional[str] = None):
    """S3 client for object reads."""
    return get_aws_client("s3", region)


def get_kms_client(region: Optional[str] = None):
    """KMS client for decryption."""
    return get_aws_client("kms", region)

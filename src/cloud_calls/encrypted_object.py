"""
Fetch an encrypted object from S3 and decrypt it with KMS.

The pipeline has two stages run strictly in order: fetch_object reads the
whole object into memory, then decrypt_blob hands those exact bytes to KMS.
KMS resolves the key from the ciphertext metadata, so no key ID is passed.
"""
import logging
import sys
from typing import BinaryIO, Optional, Union

from .aws_client_factory import get_kms_client, get_s3_client
from .error_handler import ErrorPolicy, apply_policy
from .models import ObjectLocator

logger = logging.getLogger(__name__)


def fetch_object(locator: ObjectLocator, s3_client) -> bytes:
    """Read the full body of an S3 object."""
    response = s3_client.get_object(**locator.to_params())
    body = response["Body"]
    try:
        blob = body.read()
    finally:
        body.close()

    logger.debug(f"Fetched {len(blob)} bytes from {locator}")
    return blob


def decrypt_blob(blob: bytes, kms_client) -> bytes:
    """Decrypt a ciphertext blob; the key is inferred by KMS."""
    response = kms_client.decrypt(CiphertextBlob=blob)
    plaintext = response["Plaintext"]
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")

    logger.debug(f"Decrypted {len(plaintext)} bytes with key {response.get('KeyId')}")
    return plaintext


def retrieve_and_decrypt(
    locator: ObjectLocator,
    s3_client=None,
    kms_client=None,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.PROPAGATE,
    region: Optional[str] = None
) -> Optional[bytes]:
    """
    Fetch an object, then decrypt its bytes.

    Args:
        locator: Bucket and key of the ciphertext object
        s3_client: S3 client (built from region when omitted)
        kms_client: KMS client (built from region when omitted)
        on_error: PROPAGATE re-raises failures; SUPPRESS logs them and returns None
        region: AWS region used for clients that are not given

    Returns:
        Plaintext bytes, or None if a stage failed and was suppressed
    """
    policy = ErrorPolicy.parse(on_error)
    context = {"bucket": locator.bucket, "key": locator.key}

    try:
        if s3_client is None:
            s3_client = get_s3_client(region)
        blob = fetch_object(locator, s3_client)
    except Exception as e:
        return apply_policy(e, policy, {**context, "operation": "GetObject"})

    try:
        if kms_client is None:
            kms_client = get_kms_client(region)
        plaintext = decrypt_blob(blob, kms_client)
    except Exception as e:
        return apply_policy(e, policy, {**context, "operation": "Decrypt"})

    logger.info(f"Decrypted {locator}", extra={
        'extra_fields': {**context, 'plaintext_bytes': len(plaintext)}
    })
    return plaintext


def write_plaintext(plaintext: bytes, stream: Optional[BinaryIO] = None):
    """Write raw plaintext bytes and a trailing newline to stdout."""
    if stream is None:
        stream = sys.stdout.buffer
    stream.write(plaintext)
    stream.write(b"\n")
    stream.flush()

"""
Example flows for managed AWS API client calls.
"""
from .alarm_deletion import delete_alarms
from .encrypted_object import (
    decrypt_blob,
    fetch_object,
    retrieve_and_decrypt,
    write_plaintext,
)
from .error_handler import CloudCallError, ErrorPolicy
from .models import AlarmDeletionRequest, ObjectLocator

__all__ = [
    "AlarmDeletionRequest",
    "CloudCallError",
    "ErrorPolicy",
    "ObjectLocator",
    "decrypt_blob",
    "delete_alarms",
    "fetch_object",
    "retrieve_and_decrypt",
    "write_plaintext",
]

"""
Request structures passed to the AWS clients.
"""
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .error_handler import ValidationError


@dataclass(frozen=True)
class AlarmDeletionRequest:
    """Names of the CloudWatch alarms to delete, in submission order."""
    alarm_names: Tuple[str, ...]

    def __post_init__(self):
        if isinstance(self.alarm_names, str):
            names = (self.alarm_names,)
        else:
            names = tuple(self.alarm_names)
        if not names:
            raise ValidationError("At least one alarm name is required")
        for name in names:
            if not isinstance(name, str) or not name:
                raise ValidationError(
                    "Alarm names must be non-empty strings",
                    context={"alarm_name": repr(name)}
                )
        object.__setattr__(self, "alarm_names", names)

    def to_params(self) -> Dict[str, Any]:
        """Keyword arguments for CloudWatch.Client.delete_alarms."""
        return {"AlarmNames": list(self.alarm_names)}


@dataclass(frozen=True)
class ObjectLocator:
    """Bucket and key of a stored ciphertext blob."""
    bucket: str
    key: str

    def __post_init__(self):
        if not self.bucket:
            raise ValidationError("Bucket name is required")
        if not self.key:
            raise ValidationError("Object key is required", context={"bucket": self.bucket})

    def to_params(self) -> Dict[str, str]:
        """Keyword arguments for S3.Client.get_object."""
        return {"Bucket": self.bucket, "Key": self.key}

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

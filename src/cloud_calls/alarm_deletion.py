"""
Delete CloudWatch alarms by name.
"""
import logging
from typing import Any, Dict, Iterable, Optional, Union

from .aws_client_factory import get_cloudwatch_client
from .error_handler import ErrorPolicy, apply_policy
from .models import AlarmDeletionRequest

logger = logging.getLogger(__name__)


def delete_alarms(
    request: Union[AlarmDeletionRequest, Iterable[str]],
    client=None,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.SUPPRESS,
    region: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Submit one DeleteAlarms request and return the service response.

    Args:
        request: Alarm names to delete, or a prepared AlarmDeletionRequest
        client: CloudWatch client (built from region when omitted)
        on_error: SUPPRESS logs failures and returns None; PROPAGATE re-raises
        region: AWS region used when no client is given

    Returns:
        The delete_alarms response, or None if the call failed and was suppressed
    """
    policy = ErrorPolicy.parse(on_error)
    if not isinstance(request, AlarmDeletionRequest):
        request = AlarmDeletionRequest(request)

    context = {"operation": "DeleteAlarms", "alarm_names": list(request.alarm_names)}

    try:
        if client is None:
            client = get_cloudwatch_client(region)
        response = client.delete_alarms(**request.to_params())
    except Exception as e:
        return apply_policy(e, policy, context)

    request_id = response.get("ResponseMetadata", {}).get("RequestId")
    logger.info(f"Success, alarm deleted; requestID: {request_id}", extra={
        'extra_fields': {**context, 'aws_request_id': request_id}
    })
    return response

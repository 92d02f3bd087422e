"""Gmail service factory and request execution for gml SDK."""

import logging
from typing import Any, Optional

import httplib2
from google.auth.exceptions import RefreshError
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..auth import get_authenticator
from ..config import Config
from ..exceptions import AuthError, FetchError
from ..timing import Deadline, check_deadline, time_api_call

logger = logging.getLogger(__name__)


def get_gmail_service(config: Config) -> Any:
    """
    Get an authenticated Gmail API service object.

    Args:
        config: Loaded gml configuration

    Returns:
        Gmail API service object

    Raises:
        ConfigError: If credential files are missing
        AuthError: If credentials cannot be loaded
    """
    authenticator = get_authenticator(config)
    creds = authenticator.get_credentials()
    logger.debug(f"Building Gmail service using {type(authenticator).__name__}")
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


@time_api_call
def execute_request(request: Any, operation: str, deadline: Optional[Deadline] = None) -> dict:
    """
    Execute a prepared API request, wrapping failures with operation context.

    With a timed deadline the request runs on a connection whose socket
    timeout is the time remaining, so a stalled call is cut off when the
    deadline passes.

    Raises:
        OperationCancelledError: If the deadline passed before or during the call
        FetchError: If the API returned an error or the connection failed
        AuthError: If the token could not be refreshed mid-call
    """
    check_deadline(deadline, operation)
    execute_kwargs = {}
    remaining = deadline.remaining() if deadline is not None else None
    if remaining is not None:
        execute_kwargs["http"] = AuthorizedHttp(
            request.http.credentials, http=httplib2.Http(timeout=remaining)
        )
    try:
        return request.execute(**execute_kwargs)
    except HttpError as e:
        raise FetchError(f"{operation}: {e}") from e
    except RefreshError as e:
        raise AuthError(f"{operation}: token refresh failed, please run 'gml auth' first: {e}") from e
    except (OSError, httplib2.HttpLib2Error) as e:
        check_deadline(deadline, operation)
        raise FetchError(f"{operation}: {e}") from e

"""AWS Cognito identity provider implementation.

Wraps the boto3 ``cognito-idp`` client. boto3 is blocking, so every call
runs in a worker thread. Transport-level retries and timeouts are handled by
botocore; this module only translates Cognito error codes into the
application's error taxonomy.
"""

import asyncio
import base64
import hashlib
import hmac
from typing import Any, Mapping

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.exceptions import (
    AccountDisabledError,
    AppException,
    EmailTakenError,
    IdentityProviderError,
    InvalidCredentialsError,
    InvalidFormatError,
    RateLimitedError,
    WeakPasswordError,
)
from infrastructure.identity.provider import AuthTokens

logger = structlog.get_logger()

THROTTLING_CODES = frozenset(
    {
        "TooManyRequestsException",
        "TooManyFailedAttemptsException",
        "LimitExceededException",
    }
)


def create_cognito_client(
    region: str = settings.aws_region,
    max_attempts: int = settings.cognito_max_attempts,
    timeout_seconds: int = settings.cognito_timeout_seconds,
) -> Any:
    """Create a boto3 Cognito client with bounded retries and timeouts."""
    config = Config(
        region_name=region,
        connect_timeout=timeout_seconds,
        read_timeout=timeout_seconds,
        retries={"max_attempts": max_attempts, "mode": "standard"},
    )
    return boto3.client("cognito-idp", config=config)


def translate_client_error(
    error: ClientError,
    credentials_message: str = "Invalid email or password",
) -> AppException:
    """Map a Cognito error response onto an application exception."""
    code = error.response.get("Error", {}).get("Code", "")
    message = error.response.get("Error", {}).get("Message", "") or str(error)

    if code == "UsernameExistsException":
        return EmailTakenError()
    if code == "InvalidPasswordException":
        return WeakPasswordError()
    if code == "InvalidParameterException":
        return InvalidFormatError()
    if code == "UserDisabledException" or (
        code == "NotAuthorizedException" and "disabled" in message.lower()
    ):
        return AccountDisabledError()
    if code in ("UserNotFoundException", "NotAuthorizedException"):
        return InvalidCredentialsError(credentials_message)
    if code in THROTTLING_CODES:
        return RateLimitedError()
    return IdentityProviderError(message)


def _to_attribute_list(attributes: Mapping[str, str | None]) -> list[dict[str, str]]:
    """Convert a mapping into Cognito's attribute list, dropping empty values."""
    return [
        {"Name": name, "Value": value}
        for name, value in attributes.items()
        if value
    ]


class CognitoIdentityProvider:
    """Identity provider backed by an AWS Cognito user pool.

    The user's email is used as the Cognito username.
    """

    def __init__(
        self,
        client: Any | None = None,
        client_id: str = settings.cognito_client_id,
        user_pool_id: str = settings.cognito_user_pool_id,
        client_secret: str = settings.cognito_client_secret,
    ) -> None:
        self._client = client if client is not None else create_cognito_client()
        self._client_id = client_id
        self._user_pool_id = user_pool_id
        self._client_secret = client_secret

    async def sign_up(self, email: str, password: str, name: str) -> str:
        """Register a new user and return its subject identifier (UserSub)."""
        params: dict[str, Any] = {
            "ClientId": self._client_id,
            "Username": email,
            "Password": password,
            "UserAttributes": [
                {"Name": "email", "Value": email},
                {"Name": "name", "Value": name},
            ],
        }
        secret_hash = self._secret_hash(email)
        if secret_hash:
            params["SecretHash"] = secret_hash

        response = await self._call("sign_up", params, log_context={"email": email})
        return str(response["UserSub"])

    async def sign_in(self, email: str, password: str) -> AuthTokens:
        """Authenticate with the USER_PASSWORD_AUTH flow."""
        auth_parameters = {"USERNAME": email, "PASSWORD": password}
        secret_hash = self._secret_hash(email)
        if secret_hash:
            auth_parameters["SECRET_HASH"] = secret_hash

        response = await self._call(
            "initiate_auth",
            {
                "ClientId": self._client_id,
                "AuthFlow": "USER_PASSWORD_AUTH",
                "AuthParameters": auth_parameters,
            },
            log_context={"email": email},
        )

        result = response.get("AuthenticationResult")
        if not result:
            # e.g. NEW_PASSWORD_REQUIRED; challenges are not supported
            logger.warning(
                "cognito_auth_challenge",
                email=email,
                challenge=response.get("ChallengeName"),
            )
            raise IdentityProviderError("Authentication failed - no result")

        return AuthTokens(
            access_token=result["AccessToken"],
            id_token=result["IdToken"],
            refresh_token=result.get("RefreshToken", ""),
            expires_in=int(result.get("ExpiresIn", 0)),
        )

    async def add_to_group(self, email: str, group: str) -> None:
        """Add a user to a user pool group."""
        await self._call(
            "admin_add_user_to_group",
            {
                "UserPoolId": self._user_pool_id,
                "Username": email,
                "GroupName": group,
            },
            log_context={"email": email, "group": group},
        )

    async def remove_from_group(self, email: str, group: str) -> None:
        """Remove a user from a user pool group."""
        await self._call(
            "admin_remove_user_from_group",
            {
                "UserPoolId": self._user_pool_id,
                "Username": email,
                "GroupName": group,
            },
            log_context={"email": email, "group": group},
        )

    async def update_user_attributes(
        self, access_token: str, attributes: Mapping[str, str | None]
    ) -> None:
        """Update the token owner's attributes. No-op when nothing is set."""
        user_attributes = _to_attribute_list(attributes)
        if not user_attributes:
            return

        await self._call(
            "update_user_attributes",
            {"AccessToken": access_token, "UserAttributes": user_attributes},
            log_context={"attributes": [a["Name"] for a in user_attributes]},
            credentials_message="Invalid or expired access token",
        )

    async def admin_update_user_attributes(
        self, username: str, attributes: Mapping[str, str | None]
    ) -> None:
        """Update any user's attributes. No-op when nothing is set."""
        user_attributes = _to_attribute_list(attributes)
        if not user_attributes:
            return

        await self._call(
            "admin_update_user_attributes",
            {
                "UserPoolId": self._user_pool_id,
                "Username": username,
                "UserAttributes": user_attributes,
            },
            log_context={
                "username": username,
                "attributes": [a["Name"] for a in user_attributes],
            },
            credentials_message="User not found",
        )

    async def _call(
        self,
        operation: str,
        params: dict[str, Any],
        log_context: dict[str, Any],
        credentials_message: str = "Invalid email or password",
    ) -> dict[str, Any]:
        """Run a blocking client operation in a thread and translate failures."""
        method = getattr(self._client, operation)
        try:
            response: dict[str, Any] = await asyncio.to_thread(method, **params)
            return response
        except ClientError as e:
            error = e.response.get("Error", {})
            logger.warning(
                "cognito_call_failed",
                operation=operation,
                error_name=error.get("Code"),
                error_message=error.get("Message"),
                **log_context,
            )
            raise translate_client_error(e, credentials_message) from e
        except BotoCoreError as e:
            logger.error(
                "cognito_transport_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **log_context,
            )
            raise IdentityProviderError("Identity provider unavailable") from e

    def _secret_hash(self, username: str) -> str | None:
        """Compute SECRET_HASH for app clients that have a client secret."""
        if not self._client_secret:
            return None
        digest = hmac.new(
            self._client_secret.encode("utf-8"),
            msg=(username + self._client_id).encode("utf-8"),
            digestmod=hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("utf-8")

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple

from azure.cli.core.azclierror import InvalidArgumentValueError
from knack.log import get_logger

from .file_operations import deserialize_file_content

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


CREDENTIAL_FILE_KEYS = ("subscriptionId", "tenantId", "clientId", "clientSecret")


class AzureCreds(NamedTuple):
    subscription_id: str
    tenant_id: str
    client_id: str
    client_secret: str


def load_azure_creds(file_path: str) -> AzureCreds:
    """
    Reads a service principal credentials file (json or yaml) with the keys
    subscriptionId, tenantId, clientId and clientSecret.
    """
    content = deserialize_file_content(file_path)
    if not isinstance(content, dict):
        raise InvalidArgumentValueError(f"Credentials file {file_path} must contain a key/value object.")

    missing_keys = [key for key in CREDENTIAL_FILE_KEYS if not content.get(key)]
    if missing_keys:
        raise InvalidArgumentValueError(
            f"Credentials file {file_path} is missing required value(s): {', '.join(missing_keys)}."
        )

    return AzureCreds(
        subscription_id=str(content["subscriptionId"]),
        tenant_id=str(content["tenantId"]),
        client_id=str(content["clientId"]),
        client_secret=str(content["clientSecret"]),
    )


def setup_azure_credentials(cmd, credentials_file: Optional[str] = None) -> Tuple[str, "TokenCredential"]:
    """
    Resolves the subscription Id and token credential used by all management clients.

    A credentials file takes precedence over the logged-in az CLI identity.
    """
    if credentials_file:
        from azure.identity import ClientSecretCredential

        creds = load_azure_creds(credentials_file)
        logger.debug("Using service principal %s from %s.", creds.client_id, credentials_file)
        return creds.subscription_id, ClientSecretCredential(
            tenant_id=creds.tenant_id,
            client_id=creds.client_id,
            client_secret=creds.client_secret,
        )

    from azure.cli.core.commands.client_factory import get_subscription_id

    from .az_client import get_default_credential

    return get_subscription_id(cli_ctx=cmd.cli_ctx), get_default_credential()

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from time import sleep
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Type, TypeVar

from azure.cli.core.azclierror import ValidationError
from azure.core.pipeline.policies import HttpLoggingPolicy, UserAgentPolicy
from knack.log import get_logger

from ...constants import USER_AGENT

POLL_RETRIES = 720
POLL_WAIT_SEC = 5

logger = get_logger(__name__)


if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential
    from azure.core.polling import LROPoller
    from azure.mgmt.authorization import AuthorizationManagementClient
    from azure.mgmt.compute import ComputeManagementClient
    from azure.mgmt.dns import DnsManagementClient
    from azure.mgmt.msi import ManagedServiceIdentityClient
    from azure.mgmt.network import NetworkManagementClient
    from azure.mgmt.privatedns import PrivateDnsManagementClient
    from azure.mgmt.resource import ResourceManagementClient
    from azure.mgmt.storage import StorageManagementClient
    from azure.storage.blob import BlobClient

ClientType = TypeVar("ClientType")

_default_credential = None


def get_default_credential() -> "TokenCredential":
    global _default_credential
    if _default_credential is None:
        from azure.identity import AzureCliCredential

        _default_credential = AzureCliCredential()
    return _default_credential


def _build_mgmt_client(
    client_cls: Type[ClientType],
    subscription_id: str,
    credential: Optional["TokenCredential"] = None,
    **kwargs,
) -> ClientType:
    if "http_logging_policy" not in kwargs:
        kwargs["http_logging_policy"] = get_default_logging_policy()

    return client_cls(
        credential=credential or get_default_credential(),
        subscription_id=subscription_id,
        user_agent_policy=UserAgentPolicy(user_agent=USER_AGENT),
        **kwargs,
    )


def get_resource_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "ResourceManagementClient":
    from azure.mgmt.resource import ResourceManagementClient

    return _build_mgmt_client(ResourceManagementClient, subscription_id, credential, **kwargs)


def get_authz_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "AuthorizationManagementClient":
    from azure.mgmt.authorization import AuthorizationManagementClient

    return _build_mgmt_client(AuthorizationManagementClient, subscription_id, credential, **kwargs)


def get_msi_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "ManagedServiceIdentityClient":
    from azure.mgmt.msi import ManagedServiceIdentityClient

    return _build_mgmt_client(ManagedServiceIdentityClient, subscription_id, credential, **kwargs)


def get_network_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "NetworkManagementClient":
    from azure.mgmt.network import NetworkManagementClient

    return _build_mgmt_client(NetworkManagementClient, subscription_id, credential, **kwargs)


def get_dns_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "DnsManagementClient":
    from azure.mgmt.dns import DnsManagementClient

    return _build_mgmt_client(DnsManagementClient, subscription_id, credential, **kwargs)


def get_privatedns_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "PrivateDnsManagementClient":
    from azure.mgmt.privatedns import PrivateDnsManagementClient

    return _build_mgmt_client(PrivateDnsManagementClient, subscription_id, credential, **kwargs)


def get_storage_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "StorageManagementClient":
    from azure.mgmt.storage import StorageManagementClient

    return _build_mgmt_client(StorageManagementClient, subscription_id, credential, **kwargs)


def get_compute_mgmt_client(
    subscription_id: str, credential: Optional["TokenCredential"] = None, **kwargs
) -> "ComputeManagementClient":
    from azure.mgmt.compute import ComputeManagementClient

    return _build_mgmt_client(ComputeManagementClient, subscription_id, credential, **kwargs)


def get_blob_client(account_name: str, account_key: str, container_name: str, blob_name: str) -> "BlobClient":
    """
    Blob data plane access uses the storage account shared key rather than the ARM token credential.
    """
    from azure.core.credentials import AzureNamedKeyCredential
    from azure.storage.blob import BlobClient

    return BlobClient(
        account_url=get_blob_account_url(account_name),
        container_name=container_name,
        blob_name=blob_name,
        credential=AzureNamedKeyCredential(name=account_name, key=account_key),
        user_agent=USER_AGENT,
    )


def get_blob_account_url(account_name: str) -> str:
    return f"https://{account_name}.blob.core.windows.net"


def wait_for_terminal_state(poller: "LROPoller", wait_sec: int = POLL_WAIT_SEC, **_) -> Any:
    # resource client does not handle sigint well
    counter = 0
    while counter < POLL_RETRIES:
        if poller.done():
            break
        sleep(wait_sec)
        counter = counter + 1
    return poller.result()


def get_default_logging_policy() -> HttpLoggingPolicy:
    http_logging_policy = HttpLoggingPolicy(logger=logger)
    http_logging_policy.allowed_query_params.add("api-version")
    http_logging_policy.allowed_query_params.add("$filter")
    http_logging_policy.allowed_query_params.add("$expand")
    http_logging_policy.allowed_header_names.add("x-ms-correlation-request-id")

    return http_logging_policy


class ResourceIdContainer(NamedTuple):
    subscription_id: str
    resource_group_name: str
    resource_name: str
    resource_id: str


def parse_resource_id(resource_id: str) -> Optional[ResourceIdContainer]:
    if not resource_id:
        return None

    parts = resource_id.split("/")
    if len(parts) < 9:
        raise ValidationError(
            f"Malformed resource Id '{resource_id}'. An Azure resource Id has the form:\n"
            "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroup}"
            "/providers/Microsoft.Provider/{resourcePath}/{resourceName}"
        )

    return ResourceIdContainer(
        subscription_id=parts[2],
        resource_group_name=parts[4],
        resource_name=parts[-1],
        resource_id=resource_id,
    )

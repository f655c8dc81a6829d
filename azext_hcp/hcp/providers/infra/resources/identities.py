# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Optional, Tuple

from azure.cli.core.azclierror import AzureResponseError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import get_msi_mgmt_client

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


class ManagedIdentities:
    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.msi_mgmt_client = get_msi_mgmt_client(subscription_id=subscription_id, credential=credential)

    def create(self, name: str, resource_group_name: str, location: str) -> Tuple[str, str]:
        """
        Creates or updates a user-assigned identity. Returns the identity's (resource id, principal id).
        """
        try:
            identity = self.msi_mgmt_client.user_assigned_identities.create_or_update(
                resource_group_name=resource_group_name,
                resource_name=name,
                parameters={"location": location},
            )
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create managed identity '{name}': {e.message}")

        if not identity.id or not identity.principal_id:
            raise AzureResponseError(f"created managed identity '{name}' has no resource Id or principal Id.")

        return identity.id, identity.principal_id

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Dict, Optional, Tuple

from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import get_resource_client

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


class ResourceGroups:
    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.subscription_id = subscription_id
        self.resource_client = get_resource_client(subscription_id=subscription_id, credential=credential)

    def show(self, name: str):
        return self.resource_client.resource_groups.get(resource_group_name=name)

    def resolve(
        self,
        name: str,
        location: str,
        existing_name: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None,
    ) -> Tuple[str, str]:
        """
        Fetches the existing group when existing_name is provided, otherwise creates or updates
        the group called name. Returns the group's (id, name).
        """
        if existing_name:
            try:
                resource_group = self.show(existing_name)
            except HttpResponseError as e:
                raise ResourceNotFoundError(f"failed to get resource group name, '{existing_name}': {e.message}")
            logger.info("Successfully found existing resource group %s", resource_group.name)
            return resource_group.id, resource_group.name

        parameters = {"location": location, "tags": dict(tags or {})}
        try:
            resource_group = self.resource_client.resource_groups.create_or_update(
                resource_group_name=name,
                parameters=parameters,
            )
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create resource group '{name}': {e.message}")
        logger.info("Successfully created resource group %s", resource_group.name)
        return resource_group.id, resource_group.name

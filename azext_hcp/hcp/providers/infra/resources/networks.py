# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple

from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import get_network_mgmt_client, parse_resource_id, wait_for_terminal_state
from ..common import VIRTUAL_NETWORK_ADDRESS_PREFIX, VIRTUAL_NETWORK_SUBNET_ADDRESS_PREFIX, VIRTUAL_NETWORK_SUBNET_NAME
from ..targets import CreateNetwork, NetworkPlan, ReuseNetwork

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


class NetworkResult(NamedTuple):
    vnet_id: str
    vnet_name: str
    subnet_id: str
    security_group_id: Optional[str] = None


class Networks:
    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.subscription_id = subscription_id
        self.network_mgmt_client = get_network_mgmt_client(subscription_id=subscription_id, credential=credential)

    def provision(self, plan: NetworkPlan, resource_group_name: str, **kwargs) -> NetworkResult:
        if isinstance(plan, ReuseNetwork):
            return self.reuse(vnet_id=plan.vnet_id)
        if isinstance(plan, CreateNetwork):
            return self.create(plan=plan, resource_group_name=resource_group_name, **kwargs)
        raise TypeError(f"Unsupported network plan {type(plan).__name__}.")

    def reuse(self, vnet_id: str) -> NetworkResult:
        vnet_id_parts = parse_resource_id(vnet_id)
        try:
            vnet = self.network_mgmt_client.virtual_networks.get(
                resource_group_name=vnet_id_parts.resource_group_name,
                virtual_network_name=vnet_id_parts.resource_name,
            )
        except HttpResponseError as e:
            raise ResourceNotFoundError(f"failed to get virtual network '{vnet_id}': {e.message}")

        if not vnet.subnets:
            raise AzureResponseError(f"virtual network '{vnet_id}' has no subnets.")

        subnet = vnet.subnets[0]
        logger.info("Successfully retrieved existing vnet %s", vnet.name)

        security_group_id = None
        if subnet.network_security_group and subnet.network_security_group.id:
            security_group_id = subnet.network_security_group.id
            logger.info(
                "Successfully retrieved existing network security group %s",
                parse_resource_id(security_group_id).resource_name,
            )

        return NetworkResult(
            vnet_id=vnet.id,
            vnet_name=vnet.name,
            subnet_id=subnet.id,
            security_group_id=security_group_id,
        )

    def create(self, plan: CreateNetwork, resource_group_name: str, **kwargs) -> NetworkResult:
        if plan.existing_nsg:
            security_group_name, security_group_id = self.get_security_group(
                name=plan.nsg_name, resource_group_name=resource_group_name
            )
            logger.info("Successfully found existing network security group %s", security_group_name)
        else:
            security_group_name, security_group_id = self.create_security_group(
                name=plan.nsg_name, resource_group_name=resource_group_name, location=plan.location, **kwargs
            )
            logger.info("Successfully created network security group %s", security_group_name)

        vnet = self.create_virtual_network(
            name=plan.vnet_name,
            resource_group_name=resource_group_name,
            location=plan.location,
            security_group_id=security_group_id,
            **kwargs,
        )
        logger.info("Successfully created vnet %s", vnet.name)

        return NetworkResult(
            vnet_id=vnet.id,
            vnet_name=vnet.name,
            subnet_id=vnet.subnets[0].id,
            security_group_id=security_group_id,
        )

    def get_security_group(self, name: str, resource_group_name: str) -> Tuple[str, str]:
        try:
            security_group = self.network_mgmt_client.network_security_groups.get(
                resource_group_name=resource_group_name,
                network_security_group_name=name,
            )
        except HttpResponseError as e:
            raise ResourceNotFoundError(
                f"failed to get network security group '{name}' in resource group '{resource_group_name}': "
                f"{e.message}"
            )
        return security_group.name, security_group.id

    def create_security_group(self, name: str, resource_group_name: str, location: str, **kwargs) -> Tuple[str, str]:
        try:
            poller = self.network_mgmt_client.network_security_groups.begin_create_or_update(
                resource_group_name=resource_group_name,
                network_security_group_name=name,
                parameters={"location": location},
            )
            security_group = wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create network security group '{name}': {e.message}")

        return security_group.name, security_group.id

    def create_virtual_network(
        self, name: str, resource_group_name: str, location: str, security_group_id: str, **kwargs
    ):
        parameters = {
            "location": location,
            "properties": {
                "addressSpace": {"addressPrefixes": [VIRTUAL_NETWORK_ADDRESS_PREFIX]},
                "subnets": [
                    {
                        "name": VIRTUAL_NETWORK_SUBNET_NAME,
                        "properties": {
                            "addressPrefix": VIRTUAL_NETWORK_SUBNET_ADDRESS_PREFIX,
                            "networkSecurityGroup": {"id": security_group_id},
                        },
                    }
                ],
            },
        }
        try:
            poller = self.network_mgmt_client.virtual_networks.begin_create_or_update(
                resource_group_name=resource_group_name,
                virtual_network_name=name,
                parameters=parameters,
            )
            vnet = wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create vnet '{name}': {e.message}")

        if not vnet.id or not vnet.name:
            raise AzureResponseError(f"created vnet '{name}' has no ID or name")
        if not vnet.subnets:
            raise AzureResponseError(f"created vnet '{name}' has no subnets")
        if not vnet.subnets[0].id or not vnet.subnets[0].name:
            raise AzureResponseError(f"created vnet '{name}' has no subnet ID or name")

        return vnet

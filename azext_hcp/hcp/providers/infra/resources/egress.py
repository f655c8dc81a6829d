# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Optional

from azure.cli.core.azclierror import AzureResponseError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import get_network_mgmt_client, wait_for_terminal_state
from ..common import (
    LB_HEALTH_PROBE_COUNT,
    LB_HEALTH_PROBE_INTERVAL_SEC,
    LB_HEALTH_PROBE_PATH,
    LB_HEALTH_PROBE_PORT,
    LB_IDLE_TIMEOUT_MIN,
    LB_OUTBOUND_ALLOCATED_PORTS,
)

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential

LB_ID_FORMAT_STR = (
    "/subscriptions/{subscription_id}/resourceGroups/{resource_group_name}"
    "/providers/Microsoft.Network/loadBalancers/{lb_name}"
)


class Egress:
    """
    Shared outbound path for cluster nodes. The load balancer is created without inbound rules,
    those are added later by the in-cluster cloud provider.
    """

    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.subscription_id = subscription_id
        self.network_mgmt_client = get_network_mgmt_client(subscription_id=subscription_id, credential=credential)

    def create_public_ip(self, name: str, resource_group_name: str, location: str, **kwargs):
        parameters = {
            "name": name,
            "location": location,
            "sku": {"name": "Standard"},
            "properties": {
                "publicIPAddressVersion": "IPv4",
                "publicIPAllocationMethod": "Static",
                "idleTimeoutInMinutes": LB_IDLE_TIMEOUT_MIN,
            },
        }
        try:
            poller = self.network_mgmt_client.public_ip_addresses.begin_create_or_update(
                resource_group_name=resource_group_name,
                public_ip_address_name=name,
                parameters=parameters,
            )
            return wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create public IP address '{name}': {e.message}")

    def get_lb_id(self, name: str, resource_group_name: str) -> str:
        return LB_ID_FORMAT_STR.format(
            subscription_id=self.subscription_id, resource_group_name=resource_group_name, lb_name=name
        )

    def build_load_balancer(self, name: str, resource_group_name: str, location: str, public_ip_id: str) -> dict:
        lb_id = self.get_lb_id(name=name, resource_group_name=resource_group_name)
        return {
            "location": location,
            "sku": {"name": "Standard"},
            "properties": {
                "frontendIPConfigurations": [
                    {
                        "name": name,
                        "properties": {
                            "privateIPAllocationMethod": "Dynamic",
                            "publicIPAddress": {"id": public_ip_id},
                        },
                    }
                ],
                "backendAddressPools": [{"name": name}],
                "probes": [
                    {
                        "name": name,
                        "properties": {
                            "protocol": "Http",
                            "port": LB_HEALTH_PROBE_PORT,
                            "intervalInSeconds": LB_HEALTH_PROBE_INTERVAL_SEC,
                            "numberOfProbes": LB_HEALTH_PROBE_COUNT,
                            "requestPath": LB_HEALTH_PROBE_PATH,
                        },
                    }
                ],
                # https://learn.microsoft.com/en-us/azure/load-balancer/load-balancer-outbound-connections#outboundrules
                "outboundRules": [
                    {
                        "name": name,
                        "properties": {
                            "backendAddressPool": {"id": f"{lb_id}/backendAddressPools/{name}"},
                            "frontendIPConfigurations": [{"id": f"{lb_id}/frontendIPConfigurations/{name}"}],
                            "protocol": "All",
                            "allocatedOutboundPorts": LB_OUTBOUND_ALLOCATED_PORTS,
                            "enableTcpReset": True,
                            "idleTimeoutInMinutes": LB_IDLE_TIMEOUT_MIN,
                        },
                    }
                ],
            },
        }

    def create_load_balancer(self, name: str, resource_group_name: str, location: str, public_ip_id: str, **kwargs):
        parameters = self.build_load_balancer(
            name=name, resource_group_name=resource_group_name, location=location, public_ip_id=public_ip_id
        )
        try:
            poller = self.network_mgmt_client.load_balancers.begin_create_or_update(
                resource_group_name=resource_group_name,
                load_balancer_name=name,
                parameters=parameters,
            )
            return wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create guest cluster egress load balancer '{name}': {e.message}")

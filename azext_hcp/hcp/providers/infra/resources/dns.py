# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Optional, Tuple

from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import get_dns_mgmt_client, get_privatedns_mgmt_client, wait_for_terminal_state
from ..common import PRIVATE_DNS_ZONE_LOCATION, VIRTUAL_NETWORK_LINK_LOCATION

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


class DnsZones:
    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.dns_mgmt_client = get_dns_mgmt_client(subscription_id=subscription_id, credential=credential)
        self.privatedns_mgmt_client = get_privatedns_mgmt_client(
            subscription_id=subscription_id, credential=credential
        )

    def get_base_domain_id(self, base_domain: str) -> str:
        """
        Pages through every public DNS zone in the subscription looking for an exact name match.
        """
        try:
            for zone in self.dns_mgmt_client.zones.list():
                if zone.name == base_domain:
                    return zone.id
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to retrieve list of DNS zones: {e.message}")

        raise ResourceNotFoundError(f"could not find any DNS zones in subscription matching '{base_domain}'")

    def create_private_zone(self, name: str, resource_group_name: str, **kwargs) -> Tuple[str, str]:
        try:
            poller = self.privatedns_mgmt_client.private_zones.begin_create_or_update(
                resource_group_name=resource_group_name,
                private_zone_name=name,
                parameters={"location": PRIVATE_DNS_ZONE_LOCATION},
            )
            private_zone = wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create private DNS zone '{name}': {e.message}")

        return private_zone.id, private_zone.name

    def create_zone_link(
        self, name: str, private_zone_name: str, resource_group_name: str, vnet_id: str, **kwargs
    ):
        parameters = {
            "location": VIRTUAL_NETWORK_LINK_LOCATION,
            "properties": {
                "virtualNetwork": {"id": vnet_id},
                "registrationEnabled": False,
            },
        }
        try:
            poller = self.privatedns_mgmt_client.virtual_network_links.begin_create_or_update(
                resource_group_name=resource_group_name,
                private_zone_name=private_zone_name,
                virtual_network_link_name=name,
                parameters=parameters,
            )
            return wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(
                f"failed to set up network link '{name}' for private DNS zone '{private_zone_name}': {e.message}"
            )

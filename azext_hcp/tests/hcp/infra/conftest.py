# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Dict
from unittest.mock import Mock

import pytest

from ...conftest import get_done_poller
from ...generators import generate_random_string, generate_resource_id, generate_uuid, get_zeroed_subscription

INFRA_PATH = "azext_hcp.hcp.providers.infra"
CONTRIBUTOR_ROLE_ID = (
    "/subscriptions/00000000-0000-0000-0000-000000000000/providers/Microsoft.Authorization"
    "/roleDefinitions/b24988ac-6180-42a0-ab88-20f7382dd24c"
)


def _named(mocker, name: str, resource_id: str, **attrs) -> Mock:
    resource = mocker.Mock(id=resource_id, **attrs)
    resource.name = name
    return resource


def _network_id(rg_name: str, path: str) -> str:
    return generate_resource_id(resource_group_name=rg_name, resource_provider="Microsoft.Network", resource_path=path)


@pytest.fixture
def mocked_infra_clients(mocker) -> Dict[str, Mock]:
    """
    Patches every management client factory used by the provisioners with mocks
    whose create operations succeed immediately.
    """
    credential = mocker.Mock()
    mocker.patch(
        f"{INFRA_PATH}.work.setup_azure_credentials", return_value=(get_zeroed_subscription(), credential)
    )
    clients = {
        "resource": mocker.patch(f"{INFRA_PATH}.resources.resource_groups.get_resource_client").return_value,
        "msi": mocker.patch(f"{INFRA_PATH}.resources.identities.get_msi_mgmt_client").return_value,
        "authz": mocker.patch(f"{INFRA_PATH}.permissions.get_authz_client").return_value,
        "network": mocker.Mock(),
        "dns": mocker.patch(f"{INFRA_PATH}.resources.dns.get_dns_mgmt_client").return_value,
        "privatedns": mocker.patch(f"{INFRA_PATH}.resources.dns.get_privatedns_mgmt_client").return_value,
        "storage": mocker.patch(f"{INFRA_PATH}.resources.images.get_storage_mgmt_client").return_value,
        "compute": mocker.patch(f"{INFRA_PATH}.resources.images.get_compute_mgmt_client").return_value,
        "blob_factory": mocker.patch(f"{INFRA_PATH}.resources.images.get_blob_client"),
        "copy_sleep": mocker.patch(f"{INFRA_PATH}.resources.images.sleep"),
        "credential": credential,
    }
    mocker.patch(f"{INFRA_PATH}.resources.networks.get_network_mgmt_client", return_value=clients["network"])
    mocker.patch(f"{INFRA_PATH}.resources.egress.get_network_mgmt_client", return_value=clients["network"])

    # resource group
    def _rg(resource_group_name: str, **_):
        return _named(mocker, resource_group_name, generate_resource_id(resource_group_name=resource_group_name))

    clients["resource"].resource_groups.create_or_update.side_effect = _rg
    clients["resource"].resource_groups.get.side_effect = _rg

    # base domain
    def _zones():
        return iter(
            [
                _named(mocker, "contoso.com", _network_id("dnsrg", "/dnszones/contoso.com")),
                _named(mocker, "example.com", _network_id("dnsrg", "/dnszones/example.com")),
            ]
        )

    clients["dns"].zones.list.side_effect = _zones

    # identity
    def _identity(resource_group_name: str, resource_name: str, **_):
        return mocker.Mock(
            id=generate_resource_id(
                resource_group_name=resource_group_name,
                resource_provider="Microsoft.ManagedIdentity",
                resource_path=f"/userAssignedIdentities/{resource_name}",
            ),
            principal_id=generate_uuid(),
        )

    clients["msi"].user_assigned_identities.create_or_update.side_effect = _identity

    # role binding
    contributor = mocker.Mock(id=CONTRIBUTOR_ROLE_ID, role_name="Contributor")
    clients["authz"].role_definitions.list.side_effect = lambda **_: iter([contributor])
    clients["authz"].role_assignments.list_for_scope.side_effect = lambda **_: iter([])

    # network
    def _nsg(resource_group_name: str, network_security_group_name: str, **_):
        return _named(
            mocker,
            network_security_group_name,
            _network_id(resource_group_name, f"/networkSecurityGroups/{network_security_group_name}"),
        )

    def _vnet(resource_group_name: str, virtual_network_name: str, **_):
        vnet_id = _network_id(resource_group_name, f"/virtualNetworks/{virtual_network_name}")
        subnet = _named(mocker, "default", f"{vnet_id}/subnets/default")
        subnet.network_security_group = mocker.Mock(
            id=_network_id(resource_group_name, "/networkSecurityGroups/existing-nsg")
        )
        return _named(mocker, virtual_network_name, vnet_id, subnets=[subnet])

    network = clients["network"]
    network.network_security_groups.get.side_effect = _nsg
    network.network_security_groups.begin_create_or_update.side_effect = lambda **kwargs: get_done_poller(
        mocker, _nsg(**kwargs)
    )
    network.virtual_networks.get.side_effect = _vnet
    network.virtual_networks.begin_create_or_update.side_effect = lambda **kwargs: get_done_poller(
        mocker, _vnet(**kwargs)
    )
    network.public_ip_addresses.begin_create_or_update.side_effect = lambda **kwargs: get_done_poller(
        mocker,
        _named(
            mocker,
            kwargs["public_ip_address_name"],
            _network_id(kwargs["resource_group_name"], f"/publicIPAddresses/{kwargs['public_ip_address_name']}"),
        ),
    )
    network.load_balancers.begin_create_or_update.side_effect = lambda **kwargs: get_done_poller(
        mocker,
        _named(
            mocker,
            kwargs["load_balancer_name"],
            _network_id(kwargs["resource_group_name"], f"/loadBalancers/{kwargs['load_balancer_name']}"),
        ),
    )

    # private dns
    clients["privatedns"].private_zones.begin_create_or_update.side_effect = lambda **kwargs: get_done_poller(
        mocker,
        _named(
            mocker,
            kwargs["private_zone_name"],
            _network_id(kwargs["resource_group_name"], f"/privateDnsZones/{kwargs['private_zone_name']}"),
        ),
    )
    clients["privatedns"].virtual_network_links.begin_create_or_update.side_effect = (
        lambda **kwargs: get_done_poller(mocker, mocker.Mock())
    )

    # boot image
    def _account(resource_group_name: str, account_name: str, **_):
        return get_done_poller(mocker, _named(mocker, account_name, generate_random_string()))

    clients["storage"].storage_accounts.begin_create.side_effect = _account
    clients["storage"].storage_accounts.list_keys.return_value.keys = [mocker.Mock(value=generate_random_string())]
    blob_client = clients["blob_factory"].return_value
    blob_client.url = "https://clusterabcde.blob.core.windows.net/vhd/rhcos.x86_64.vhd"
    blob_client.get_blob_properties.return_value.copy.status = "success"

    def _image(resource_group_name: str, image_name: str, **_):
        return get_done_poller(
            mocker,
            mocker.Mock(
                id=generate_resource_id(
                    resource_group_name=resource_group_name,
                    resource_provider="Microsoft.Compute",
                    resource_path=f"/images/{image_name}",
                )
            ),
        )

    clients["compute"].images.begin_create_or_update.side_effect = _image

    yield clients

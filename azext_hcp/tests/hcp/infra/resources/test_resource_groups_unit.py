# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest
from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError

from azext_hcp.hcp.providers.infra.resources.resource_groups import ResourceGroups

from ....conftest import get_http_error
from ....generators import generate_random_string, generate_resource_id, get_zeroed_subscription
from .conftest import RESOURCES_PATH


@pytest.fixture
def mocked_resource_client(mocker):
    patched = mocker.patch(f"{RESOURCES_PATH}.resource_groups.get_resource_client")
    yield patched.return_value


def _set_group(client_method, name: str):
    client_method.return_value.name = name
    client_method.return_value.id = generate_resource_id(resource_group_name=name)


def test_resolve_existing(mocked_resource_client):
    existing_name = generate_random_string()
    _set_group(mocked_resource_client.resource_groups.get, existing_name)

    resource_groups = ResourceGroups(subscription_id=get_zeroed_subscription())
    rg_id, rg_name = resource_groups.resolve(
        name=generate_random_string(), location="eastus", existing_name=existing_name
    )
    assert rg_id == generate_resource_id(resource_group_name=existing_name)
    assert rg_name == existing_name
    mocked_resource_client.resource_groups.get.assert_called_once_with(resource_group_name=existing_name)
    mocked_resource_client.resource_groups.create_or_update.assert_not_called()


def test_resolve_existing_not_found(mocked_resource_client):
    existing_name = generate_random_string()
    mocked_resource_client.resource_groups.get.side_effect = get_http_error(404, "ResourceGroupNotFound")

    resource_groups = ResourceGroups(subscription_id=get_zeroed_subscription())
    with pytest.raises(ResourceNotFoundError, match=f"failed to get resource group name, '{existing_name}'"):
        resource_groups.resolve(name=generate_random_string(), location="eastus", existing_name=existing_name)
    mocked_resource_client.resource_groups.create_or_update.assert_not_called()


@pytest.mark.parametrize("tags", [None, {}, {"a": "b", "c": ""}])
def test_resolve_create(mocked_resource_client, tags):
    name = "foo-bar"
    location = generate_random_string()
    _set_group(mocked_resource_client.resource_groups.create_or_update, name)

    resource_groups = ResourceGroups(subscription_id=get_zeroed_subscription())
    rg_id, rg_name = resource_groups.resolve(name=name, location=location, tags=tags)
    assert rg_name == name
    assert rg_id == generate_resource_id(resource_group_name=name)

    create_kwargs = mocked_resource_client.resource_groups.create_or_update.call_args.kwargs
    assert create_kwargs["resource_group_name"] == name
    assert create_kwargs["parameters"] == {"location": location, "tags": tags or {}}
    mocked_resource_client.resource_groups.get.assert_not_called()


def test_resolve_create_error(mocked_resource_client):
    mocked_resource_client.resource_groups.create_or_update.side_effect = get_http_error(400, "InvalidLocation")

    resource_groups = ResourceGroups(subscription_id=get_zeroed_subscription())
    with pytest.raises(AzureResponseError, match="failed to create resource group"):
        resource_groups.resolve(name=generate_random_string(), location=generate_random_string())

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from azext_hcp.hcp.providers.infra.rp_namespace import register_providers


def _get_provider(mocker, namespace: str, registration_state: str):
    return mocker.Mock(namespace=namespace, registration_state=registration_state)


def test_register_providers(mocker):
    resource_client = mocker.Mock()
    resource_client.providers.list.return_value = iter(
        [
            _get_provider(mocker, "Microsoft.Compute", "Registered"),
            _get_provider(mocker, "Microsoft.Network", "NotRegistered"),
            _get_provider(mocker, "microsoft.storage", "Unregistered"),
            _get_provider(mocker, "Microsoft.ManagedIdentity", "Registered"),
            _get_provider(mocker, "Microsoft.Kubernetes", "NotRegistered"),
        ]
    )

    registered = register_providers(resource_client=resource_client)
    assert registered == ["Microsoft.Network", "microsoft.storage"]
    assert resource_client.providers.register.call_count == 2
    resource_client.providers.register.assert_any_call("Microsoft.Network")
    resource_client.providers.register.assert_any_call("microsoft.storage")


def test_register_providers_custom_namespaces(mocker):
    resource_client = mocker.Mock()
    resource_client.providers.list.return_value = iter(
        [
            _get_provider(mocker, "Microsoft.Network", "NotRegistered"),
            _get_provider(mocker, "Microsoft.Storage", "NotRegistered"),
        ]
    )

    assert register_providers(resource_client=resource_client, namespaces=["microsoft.storage"]) == [
        "Microsoft.Storage"
    ]
    resource_client.providers.register.assert_called_once_with("Microsoft.Storage")

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Optional

from ....generators import generate_resource_id

RESOURCES_PATH = "azext_hcp.hcp.providers.infra.resources"


def get_mock_resource(mocker, name: str, resource_group_name: str, resource_path: Optional[str] = None, **attrs):
    """
    Builds a management SDK model stand-in exposing id and name attributes.
    """
    resource = mocker.Mock()
    resource.name = name
    resource.id = generate_resource_id(
        resource_group_name=resource_group_name,
        resource_provider="Microsoft.Network" if resource_path else None,
        resource_path=f"{resource_path}/{name}" if resource_path else None,
    )
    for key in attrs:
        setattr(resource, key, attrs[key])
    return resource

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import TYPE_CHECKING, Iterable, List

from knack.log import get_logger

from .common import REQUIRED_RP_NAMESPACES

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.mgmt.resource import ResourceManagementClient


def register_providers(
    resource_client: "ResourceManagementClient",
    namespaces: Iterable[str] = REQUIRED_RP_NAMESPACES,
) -> List[str]:
    """
    Registers each required resource provider namespace that is not yet registered.
    Returns the namespaces a registration was requested for.
    """
    required_providers = {namespace.lower() for namespace in namespaces}
    registered = []
    for provider in resource_client.providers.list():
        if not provider.namespace or provider.namespace.lower() not in required_providers:
            continue
        if provider.registration_state == "Registered":
            logger.debug("RP %s is already registered.", provider.namespace)
            continue
        logger.debug("Registering RP %s.", provider.namespace)
        resource_client.providers.register(provider.namespace)
        registered.append(provider.namespace)

    return registered

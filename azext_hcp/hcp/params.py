# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
CLI parameter definitions.
"""

from azure.cli.core.commands.parameters import (
    get_three_state_flag,
    tags_type,
)

from ._validators import (
    validate_cluster_name,
    validate_infra_id,
    validate_network_security_group,
    validate_rhcos_image,
)
from .providers.infra.common import DEFAULT_LOCATION


def load_hcp_arguments(self, _):
    """
    Load CLI Args for Knack parser
    """
    with self.argument_context("hcp infra") as context:
        context.argument(
            "no_progress",
            options_list=["--no-progress"],
            arg_type=get_three_state_flag(),
            help="Disable visual representation of work.",
        )

    with self.argument_context("hcp infra create") as context:
        context.argument(
            "name",
            options_list=["--name", "-n"],
            validator=validate_cluster_name,
            help="Name of the hosted cluster. Used as the prefix of derived resource names.",
        )
        context.argument(
            "infra_id",
            options_list=["--infra-id"],
            validator=validate_infra_id,
            help="Cluster infrastructure Id. Used to name the resources provisioned for the cluster.",
        )
        context.argument(
            "base_domain",
            options_list=["--base-domain"],
            help="Name of an existing public DNS zone in the subscription. "
            "The private zone is created as '{name}-azurecluster.{base-domain}'.",
        )
        context.argument(
            "location",
            options_list=["--location", "-l"],
            help=f"The region of the provisioned resources. The default is '{DEFAULT_LOCATION}'.",
        )
        context.argument(
            "resource_group_name",
            options_list=["--resource-group-name", "--rg"],
            help="Name of an existing resource group to provision into. "
            "If not provided a resource group named '{name}-{infra-id}' is created.",
        )
        context.argument(
            "resource_group_tags",
            options_list=["--resource-group-tags", "--tags"],
            arg_type=tags_type,
            help="Tags applied to a created resource group. Ignored when --resource-group-name is used. "
            "Format: key=value pairs separated by space.",
        )
        context.argument(
            "vnet_id",
            options_list=["--vnet-id"],
            help="Resource Id of an existing virtual network. Its first subnet is used as the cluster subnet. "
            "If not provided a virtual network and network security group are created.",
        )
        context.argument(
            "network_security_group",
            options_list=["--network-security-group", "--nsg"],
            validator=validate_network_security_group,
            help="Name of an existing network security group in --resource-group-name "
            "attached to the created virtual network's subnet.",
        )
        context.argument(
            "rhcos_image",
            options_list=["--rhcos-image"],
            validator=validate_rhcos_image,
            help="Url of the RHCOS VHD to copy. Must be hosted at https://rhcos.blob.core.windows.net.",
        )
        context.argument(
            "azure_creds",
            options_list=["--azure-creds"],
            help="Path to a json or yaml file with the keys subscriptionId, tenantId, clientId and "
            "clientSecret. If not provided the logged-in az CLI identity and subscription are used.",
        )
        context.argument(
            "output_file",
            options_list=["--output-file"],
            help="Path of a file the yaml representation of the provisioned infrastructure is written to.",
        )

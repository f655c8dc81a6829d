# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
Load CLI commands
"""
from azure.cli.core.commands import CliCommandType

infra_resource_ops = CliCommandType(operations_tmpl="azext_hcp.hcp.commands_infra#{}")


def load_hcp_commands(self, _):
    """
    Load CLI commands
    """
    with self.command_group(
        "hcp infra",
        command_type=infra_resource_ops,
        is_preview=True,
    ) as cmd_group:
        cmd_group.command("create", "create_infra")

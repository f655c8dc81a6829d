# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from azure.cli.core import AzCommandsLoader
from azext_hcp.constants import VERSION


class HcpExtensionCommandsLoader(AzCommandsLoader):
    def __init__(self, cli_ctx=None):
        super(HcpExtensionCommandsLoader, self).__init__(cli_ctx=cli_ctx)

    def load_command_table(self, args):
        from azext_hcp.hcp.command_map import load_hcp_commands

        load_hcp_commands(self, args)

        return self.command_table

    def load_arguments(self, command):
        from azext_hcp.hcp.params import load_hcp_arguments

        load_hcp_arguments(self, command)


COMMAND_LOADER_CLS = HcpExtensionCommandsLoader

__version__ = VERSION

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from enum import IntEnum
from time import sleep
from typing import Dict, Optional, Tuple
from uuid import uuid4

import yaml
from azure.cli.core.azclierror import AzureResponseError, FileOperationError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger
from rich.console import NewLine
from rich.live import Live
from rich.padding import Padding
from rich.progress import Progress, SpinnerColumn, TimeElapsedColumn
from rich.style import Style
from rich.table import Table
from rich.text import Text

from ...util.credentials import setup_azure_credentials
from ...util.file_operations import write_content_to_file
from .permissions import PermissionManager
from .resources.dns import DnsZones
from .resources.egress import Egress
from .resources.identities import ManagedIdentities
from .resources.images import BootImages
from .resources.networks import Networks
from .resources.resource_groups import ResourceGroups
from .targets import InfraOutput, InfraTargets, ReuseNetwork

logger = get_logger(__name__)


class WorkCategoryKey(IntEnum):
    PRE_FLIGHT = 1
    IDENTITY = 2
    NETWORK = 3
    BOOT_IMAGE = 4


class WorkStepKey(IntEnum):
    REG_RP = 1
    ENUMERATE_PRE_FLIGHT = 2
    RESOURCE_GROUP = 3
    BASE_DOMAIN = 4
    MANAGED_IDENTITY = 5
    ROLE_ASSIGNMENT = 6
    VIRTUAL_NETWORK = 7
    PRIVATE_ZONE = 8
    ZONE_LINK = 9
    PUBLIC_IP = 10
    LOAD_BALANCER = 11
    IMAGE = 12
    OUTPUT = 13


class WorkRecord:
    def __init__(self, title: str, description: Optional[str] = None):
        self.title = title
        self.description = description


class WorkDisplay:
    def __init__(self):
        self._categories: Dict[int, Tuple[WorkRecord, bool]] = {}
        self._steps: Dict[int, Dict[int, WorkRecord]] = {}

    def add_category(
        self, category: WorkCategoryKey, title: str, skipped: bool = False, description: Optional[str] = None
    ):
        self._categories[category] = (WorkRecord(title, description), skipped)
        self._steps[category] = {}

    def add_step(self, category: WorkCategoryKey, step: WorkStepKey, title: str, description: Optional[str] = None):
        self._steps[category][step] = WorkRecord(title, description)

    @property
    def categories(self) -> Dict[int, Tuple[WorkRecord, bool]]:
        return self._categories

    @property
    def steps(self) -> Dict[int, Dict[int, WorkRecord]]:
        return self._steps

    def get_step_title(self, step: int) -> Optional[str]:
        for category in self._steps:
            if step in self._steps[category]:
                return self._steps[category][step].title


class WorkManager:
    def __init__(self, cmd, credentials_file: Optional[str] = None):
        self.cmd = cmd
        self.subscription_id, self.credential = setup_azure_credentials(cmd, credentials_file=credentials_file)

        client_kwargs = {"subscription_id": self.subscription_id, "credential": self.credential}
        self.resource_groups = ResourceGroups(**client_kwargs)
        self.identities = ManagedIdentities(**client_kwargs)
        self.permission_manager = PermissionManager(**client_kwargs)
        self.networks = Networks(**client_kwargs)
        self.dns_zones = DnsZones(**client_kwargs)
        self.egress = Egress(**client_kwargs)
        self.boot_images = BootImages(**client_kwargs)

    def _bootstrap_ux(self, show_progress: bool = False):
        self._display = WorkDisplay()
        self._live = Live(None, transient=False, refresh_per_second=8, auto_refresh=show_progress)
        self._progress_bar = Progress(
            SpinnerColumn(),
            *Progress.get_default_columns(),
            "Elapsed:",
            TimeElapsedColumn(),
            transient=False,
        )
        self._show_progress = show_progress
        self._progress_shown = False

    def _build_display(self):
        self._display.add_category(WorkCategoryKey.PRE_FLIGHT, "Pre-Flight", skipped=not self._pre_flight)
        self._display.add_step(WorkCategoryKey.PRE_FLIGHT, WorkStepKey.REG_RP, "Ensure registered resource providers")
        self._display.add_step(
            WorkCategoryKey.PRE_FLIGHT, WorkStepKey.ENUMERATE_PRE_FLIGHT, "Enumerate pre-flight checks"
        )

        self._display.add_category(WorkCategoryKey.IDENTITY, "Resource group and identity")
        rg_title = (
            f"Resolve resource group [cyan]{self._targets.resource_group_name}"
            if self._targets.resource_group_name
            else f"Create resource group [cyan]{self._targets.default_resource_group_name}"
        )
        self._display.add_step(WorkCategoryKey.IDENTITY, WorkStepKey.RESOURCE_GROUP, rg_title)
        self._display.add_step(
            WorkCategoryKey.IDENTITY, WorkStepKey.BASE_DOMAIN, f"Find DNS zone [cyan]{self._targets.base_domain}"
        )
        self._display.add_step(
            WorkCategoryKey.IDENTITY,
            WorkStepKey.MANAGED_IDENTITY,
            f"Create managed identity [cyan]{self._targets.identity_name}",
        )
        self._display.add_step(WorkCategoryKey.IDENTITY, WorkStepKey.ROLE_ASSIGNMENT, "Assign 'Contributor' role")

        self._display.add_category(WorkCategoryKey.NETWORK, "Network")
        network_plan = self._targets.network_plan
        network_title = (
            "Resolve virtual network"
            if isinstance(network_plan, ReuseNetwork)
            else f"Create virtual network [cyan]{network_plan.vnet_name}"
        )
        self._display.add_step(WorkCategoryKey.NETWORK, WorkStepKey.VIRTUAL_NETWORK, network_title)
        self._display.add_step(
            WorkCategoryKey.NETWORK,
            WorkStepKey.PRIVATE_ZONE,
            f"Create private DNS zone [cyan]{self._targets.private_zone_name}",
        )
        self._display.add_step(WorkCategoryKey.NETWORK, WorkStepKey.ZONE_LINK, "Link private DNS zone")
        self._display.add_step(
            WorkCategoryKey.NETWORK, WorkStepKey.PUBLIC_IP, f"Create public IP [cyan]{self._targets.egress_name}"
        )
        self._display.add_step(
            WorkCategoryKey.NETWORK,
            WorkStepKey.LOAD_BALANCER,
            f"Create egress load balancer [cyan]{self._targets.egress_name}",
        )

        self._display.add_category(WorkCategoryKey.BOOT_IMAGE, "Boot image")
        self._display.add_step(
            WorkCategoryKey.BOOT_IMAGE,
            WorkStepKey.IMAGE,
            "Copy and register RHCOS image",
            f"[dim]{self._targets.rhcos_image}",
        )
        if self._targets.output_file:
            self._display.add_step(
                WorkCategoryKey.BOOT_IMAGE,
                WorkStepKey.OUTPUT,
                f"Write output file [cyan]{self._targets.output_file}",
            )

    def execute_infra_create(
        self,
        show_progress: bool = True,
        pre_flight: bool = True,
        **kwargs,
    ) -> dict:
        self._targets = InfraTargets(**kwargs)
        # Input errors must surface before any remote call.
        self._targets.validate()

        self._bootstrap_ux(show_progress=show_progress)
        self._work_id = uuid4().hex
        self._pre_flight = pre_flight
        self._completed_steps: Dict[int, int] = {}
        self._active_step: int = 0
        self._wait_kwargs = {k: kwargs[k] for k in ["wait_sec", "copy_poll_sec"] if k in kwargs}
        self._output = InfraOutput(
            base_domain=self._targets.base_domain, location=self._targets.location, infra_id=self._targets.infra_id
        )
        self._build_display()

        return self._do_work()

    def _do_work(self) -> dict:
        from .host import verify_cli_client_connections
        from .rp_namespace import register_providers

        targets = self._targets
        output = self._output
        wait_kwargs = self._wait_kwargs
        try:
            self._render_display()

            # Pre-Flight workflow
            if self._pre_flight:
                self._render_display(category=WorkCategoryKey.PRE_FLIGHT, active_step=WorkStepKey.REG_RP)
                verify_cli_client_connections()
                register_providers(resource_client=self.resource_groups.resource_client)
                self._complete_step(
                    category=WorkCategoryKey.PRE_FLIGHT,
                    completed_step=WorkStepKey.REG_RP,
                    active_step=WorkStepKey.ENUMERATE_PRE_FLIGHT,
                )
                if targets.resource_group_name:
                    self.permission_manager.verify_write_permission_against_rg(
                        resource_group_name=targets.resource_group_name
                    )
                self._complete_step(
                    category=WorkCategoryKey.PRE_FLIGHT, completed_step=WorkStepKey.ENUMERATE_PRE_FLIGHT
                )

            # Resource group and identity workflow
            self._render_display(category=WorkCategoryKey.IDENTITY, active_step=WorkStepKey.RESOURCE_GROUP)
            resource_group_id, output.resource_group_name = self.resource_groups.resolve(
                name=targets.default_resource_group_name,
                location=targets.location,
                existing_name=targets.resource_group_name,
                tags=targets.resource_group_tags,
            )
            self._complete_step(
                category=WorkCategoryKey.IDENTITY,
                completed_step=WorkStepKey.RESOURCE_GROUP,
                active_step=WorkStepKey.BASE_DOMAIN,
            )

            output.public_zone_id = self.dns_zones.get_base_domain_id(targets.base_domain)
            logger.info("Successfully found existing public zone %s", output.public_zone_id)
            self._complete_step(
                category=WorkCategoryKey.IDENTITY,
                completed_step=WorkStepKey.BASE_DOMAIN,
                active_step=WorkStepKey.MANAGED_IDENTITY,
            )

            output.machine_identity_id, principal_id = self.identities.create(
                name=targets.identity_name,
                resource_group_name=output.resource_group_name,
                location=targets.location,
            )
            logger.info("Successfully created managed identity %s", output.machine_identity_id)
            self._complete_step(
                category=WorkCategoryKey.IDENTITY,
                completed_step=WorkStepKey.MANAGED_IDENTITY,
                active_step=WorkStepKey.ROLE_ASSIGNMENT,
            )

            self.permission_manager.assign_role_by_name(scope=resource_group_id, principal_id=principal_id)
            logger.info("Successfully created role assignment for managed identity %s", targets.identity_name)
            self._complete_step(category=WorkCategoryKey.IDENTITY, completed_step=WorkStepKey.ROLE_ASSIGNMENT)

            # Network workflow
            self._render_display(category=WorkCategoryKey.NETWORK, active_step=WorkStepKey.VIRTUAL_NETWORK)
            network = self.networks.provision(
                plan=targets.network_plan, resource_group_name=output.resource_group_name, **wait_kwargs
            )
            output.vnet_id = network.vnet_id
            output.vnet_name = network.vnet_name
            output.subnet_id = network.subnet_id
            output.security_group_id = network.security_group_id or ""
            self._complete_step(
                category=WorkCategoryKey.NETWORK,
                completed_step=WorkStepKey.VIRTUAL_NETWORK,
                active_step=WorkStepKey.PRIVATE_ZONE,
            )

            output.private_zone_id, private_zone_name = self.dns_zones.create_private_zone(
                name=targets.private_zone_name, resource_group_name=output.resource_group_name, **wait_kwargs
            )
            logger.info("Successfully created private DNS zone %s", private_zone_name)
            self._complete_step(
                category=WorkCategoryKey.NETWORK,
                completed_step=WorkStepKey.PRIVATE_ZONE,
                active_step=WorkStepKey.ZONE_LINK,
            )

            self.dns_zones.create_zone_link(
                name=targets.zone_link_name,
                private_zone_name=private_zone_name,
                resource_group_name=output.resource_group_name,
                vnet_id=output.vnet_id,
                **wait_kwargs,
            )
            logger.info("Successfully created private DNS zone link %s", targets.zone_link_name)
            self._complete_step(
                category=WorkCategoryKey.NETWORK,
                completed_step=WorkStepKey.ZONE_LINK,
                active_step=WorkStepKey.PUBLIC_IP,
            )

            public_ip = self.egress.create_public_ip(
                name=targets.egress_name,
                resource_group_name=output.resource_group_name,
                location=targets.location,
                **wait_kwargs,
            )
            logger.info("Successfully created public IP address %s", public_ip.name)
            self._complete_step(
                category=WorkCategoryKey.NETWORK,
                completed_step=WorkStepKey.PUBLIC_IP,
                active_step=WorkStepKey.LOAD_BALANCER,
            )

            load_balancer = self.egress.create_load_balancer(
                name=targets.egress_name,
                resource_group_name=output.resource_group_name,
                location=targets.location,
                public_ip_id=public_ip.id,
                **wait_kwargs,
            )
            logger.info("Successfully created guest cluster egress load balancer %s", load_balancer.name)
            self._complete_step(category=WorkCategoryKey.NETWORK, completed_step=WorkStepKey.LOAD_BALANCER)

            # Boot image workflow
            self._render_display(category=WorkCategoryKey.BOOT_IMAGE, active_step=WorkStepKey.IMAGE)
            output.boot_image_id = self.boot_images.create(
                image_url=targets.rhcos_image,
                resource_group_name=output.resource_group_name,
                location=targets.location,
                **wait_kwargs,
            )
            self._complete_step(
                category=WorkCategoryKey.BOOT_IMAGE, completed_step=WorkStepKey.IMAGE, active_step=WorkStepKey.OUTPUT
            )

            result = output.to_dict()
            if targets.output_file:
                self._write_output(result, targets.output_file)
                self._complete_step(category=WorkCategoryKey.BOOT_IMAGE, completed_step=WorkStepKey.OUTPUT)

            return result
        except HttpResponseError as e:
            raise AzureResponseError(f"{self._get_active_step_title()} failed: {e.message}")
        except KeyboardInterrupt:
            logger.warning(
                "Infrastructure provisioning interrupted during '%s'. Resources created so far were left in place.",
                self._get_active_step_title(),
            )
            raise
        finally:
            self._stop_display()

    def _write_output(self, result: dict, output_file: str):
        content = yaml.dump(result, default_flow_style=False)
        try:
            output_path = write_content_to_file(content=content, file_path=output_file)
        except OSError as e:
            logger.error("Output file content for %s:\n%s", output_file, content)
            raise FileOperationError(f"failed to write output file {output_file}: {e}")
        logger.info("Successfully wrote output file %s", output_path)

    def _get_active_step_title(self) -> str:
        title = self._display.get_step_title(self._active_step) if self._active_step else None
        if not title:
            return "Infrastructure provisioning"
        return Text.from_markup(title).plain

    def _complete_step(
        self, category: WorkCategoryKey, completed_step: WorkStepKey, active_step: Optional[WorkStepKey] = None
    ):
        self._completed_steps[completed_step] = 1
        self._render_display(category, active_step=active_step)

    def _render_display(self, category: Optional[WorkCategoryKey] = None, active_step: Optional[WorkStepKey] = None):
        if active_step:
            self._active_step = active_step

        if self._show_progress:
            grid = Table.grid(expand=False)
            grid.add_column()
            header_grid = Table.grid(expand=False)
            header_grid.add_column()

            header_grid.add_row(NewLine(1))
            header_grid.add_row(
                "[light_slate_gray]Hosted Cluster Infrastructure",
                style=Style(bold=True),
            )
            header_grid.add_row(f"Workflow Id: [dark_orange3]{self._work_id}")
            header_grid.add_row(NewLine(1))

            content_grid = Table.grid(expand=False)
            content_grid.add_column(max_width=3)
            content_grid.add_column(max_width=80)

            active_cat_str = "[cyan]->[/cyan] "
            active_step_str = "[cyan]*[/cyan]"
            complete_str = "[green]:heavy_check_mark:[/green]"
            for c in self._display.categories:
                cat_prefix = active_cat_str if c == category else ""
                content_grid.add_row(
                    cat_prefix,
                    f"{self._display.categories[c][0].title} "
                    f"{'[[dark_khaki]skipped[/dark_khaki]]' if self._display.categories[c][1] else ''}",
                )
                if self._display.categories[c][0].description:
                    content_grid.add_row("", Padding(self._display.categories[c][0].description, (0, 0, 0, 4)))
                for s in self._display.steps.get(c, {}):
                    if s in self._completed_steps:
                        step_prefix = complete_str
                    elif s == self._active_step:
                        step_prefix = active_step_str
                    else:
                        step_prefix = "-"

                    content_grid.add_row("", Padding(f"{step_prefix} {self._display.steps[c][s].title} ", (0, 0, 0, 2)))
                    if self._display.steps[c][s].description:
                        content_grid.add_row("", Padding(self._display.steps[c][s].description, (0, 0, 0, 4)))
            content_grid.add_row(NewLine(1), NewLine(1))

            footer_grid = Table.grid(expand=False)
            footer_grid.add_column()

            footer_grid.add_row(self._progress_bar)
            footer_grid.add_row(NewLine(1))

            grid.add_row(header_grid)
            grid.add_row(content_grid)
            grid.add_row(footer_grid)

            if not self._progress_shown:
                self._task_id = self._progress_bar.add_task(description="Work.", total=None)
                self._progress_shown = True
            self._live.update(grid)
            sleep(0.5)  # min presentation delay

        if self._show_progress and not self._live.is_started:
            self._live.start(True)

    def _stop_display(self):
        if self._show_progress and self._live.is_started:
            if self._progress_shown:
                self._progress_bar.update(self._task_id, description="Done.")
                sleep(0.5)
            self._live.stop()

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Any, Dict, Optional

from .providers.infra.common import DEFAULT_LOCATION


def create_infra(
    cmd,
    name: str,
    infra_id: str,
    base_domain: str,
    rhcos_image: str,
    location: str = DEFAULT_LOCATION,
    resource_group_name: Optional[str] = None,
    resource_group_tags: Optional[Dict[str, str]] = None,
    vnet_id: Optional[str] = None,
    network_security_group: Optional[str] = None,
    azure_creds: Optional[str] = None,
    output_file: Optional[str] = None,
    no_progress: Optional[bool] = None,
    **kwargs,
) -> Dict[str, Any]:
    from .providers.infra.common import INFRA_NO_PREFLIGHT_ENV_KEY
    from .providers.infra.work import WorkManager
    from .util import is_env_flag_enabled

    no_pre_flight = is_env_flag_enabled(INFRA_NO_PREFLIGHT_ENV_KEY)

    work_manager = WorkManager(cmd, credentials_file=azure_creds)
    return work_manager.execute_infra_create(
        show_progress=not no_progress,
        pre_flight=not no_pre_flight,
        name=name,
        infra_id=infra_id,
        base_domain=base_domain,
        rhcos_image=rhcos_image,
        location=location,
        resource_group_name=resource_group_name,
        resource_group_tags=resource_group_tags,
        vnet_id=vnet_id,
        network_security_group=network_security_group,
        output_file=output_file,
        **kwargs,
    )

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Iterable, Optional
from uuid import uuid4

from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError, ValidationError
from azure.core.exceptions import HttpResponseError, ServiceRequestError, ServiceResponseError
from knack.log import get_logger

from ...util.az_client import get_authz_client
from ...util.common import retry
from .common import (
    CONTRIBUTOR_ROLE_NAME,
    ROLE_ASSIGNMENT_MAX_ATTEMPTS,
    ROLE_ASSIGNMENT_RETRY_DELAY_SEC,
)

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential

VALID_PERM_FORMS = frozenset(
    ["*", "*/write", "microsoft.authorization/roleassignments/write", "microsoft.authorization/*/write"]
)

# Returned while a newly created principal has not yet replicated to the authorization service.
TRANSIENT_RA_ERROR_CODES = frozenset(["principalnotfound", "principalnotfoundinldap"])
ROLE_ASSIGNMENT_EXISTS_CODE = "roleassignmentexists"


class PrincipalType(Enum):
    SERVICE_PRINCIPAL = "ServicePrincipal"
    USER = "User"


def get_error_code(error: HttpResponseError) -> str:
    odata_error = getattr(error, "error", None)
    code = getattr(odata_error, "code", None) or ""
    return code.lower()


def is_transient_role_assignment_error(error: Exception) -> bool:
    if isinstance(error, (ServiceRequestError, ServiceResponseError)):
        return True
    if not isinstance(error, HttpResponseError):
        return False

    if get_error_code(error) in TRANSIENT_RA_ERROR_CODES:
        return True
    status_code = error.status_code or 0
    return status_code in (404, 408, 429) or status_code >= 500


class PermissionManager:
    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.subscription_id = subscription_id
        self.authz_client = get_authz_client(subscription_id=subscription_id, credential=credential)

    def get_role_definition_id(self, scope: str, role_name: str = CONTRIBUTOR_ROLE_NAME) -> str:
        """
        Finds the role definition visible at scope whose display name is exactly role_name.
        """
        try:
            for role_definition in self.authz_client.role_definitions.list(
                scope=scope, filter=f"roleName eq '{role_name}'"
            ):
                if role_definition.role_name == role_name:
                    return role_definition.id
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to retrieve role definitions for scope '{scope}': {e.message}")

        raise ResourceNotFoundError(f"didn't find the '{role_name}' role")

    def apply_role_assignment(
        self,
        scope: str,
        principal_id: str,
        role_def_id: str,
        principal_type: str = PrincipalType.SERVICE_PRINCIPAL.value,
        max_attempts: int = ROLE_ASSIGNMENT_MAX_ATTEMPTS,
        backoff: float = ROLE_ASSIGNMENT_RETRY_DELAY_SEC,
    ):
        """
        Binds principal_id to role_def_id against scope.

        A freshly created principal is often rejected until it replicates, so creation is retried
        up to max_attempts times with a fixed backoff (seconds) in between.
        """
        role_assignments_iter = self.authz_client.role_assignments.list_for_scope(
            scope=scope, filter=f"principalId eq '{principal_id}'"
        )
        for role_assignment in role_assignments_iter:
            if (role_assignment.role_definition_id or "").lower() == role_def_id.lower():
                logger.debug("Principal %s already has role %s against %s.", principal_id, role_def_id, scope)
                return role_assignment

        try:
            return retry(
                partial(
                    self._create_role_assignment,
                    scope=scope,
                    role_assignment_name=str(uuid4()),
                    principal_id=principal_id,
                    role_def_id=role_def_id,
                    principal_type=principal_type,
                ),
                max_attempts=max_attempts,
                backoff=backoff,
                should_retry=is_transient_role_assignment_error,
                description="Role assignment",
            )
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to add role assignment to role: {e.message}")
        except (ServiceRequestError, ServiceResponseError) as e:
            raise AzureResponseError(f"failed to add role assignment to role: {e}")

    def assign_role_by_name(
        self, scope: str, principal_id: str, role_name: str = CONTRIBUTOR_ROLE_NAME, **kwargs
    ):
        role_def_id = self.get_role_definition_id(scope=scope, role_name=role_name)
        return self.apply_role_assignment(scope=scope, principal_id=principal_id, role_def_id=role_def_id, **kwargs)

    def _create_role_assignment(
        self,
        scope: str,
        role_assignment_name: str,
        principal_id: str,
        role_def_id: str,
        principal_type: str,
    ):
        try:
            return self.authz_client.role_assignments.create(
                scope=scope,
                role_assignment_name=role_assignment_name,
                parameters={
                    "properties": {
                        "roleDefinitionId": role_def_id,
                        "principalId": principal_id,
                        "principalType": principal_type,
                    }
                },
            )
        except HttpResponseError as e:
            if e.status_code == 409 and get_error_code(e) == ROLE_ASSIGNMENT_EXISTS_CODE:
                logger.debug("Role assignment for principal %s already exists.", principal_id)
                return None
            raise

    def verify_write_permission_against_rg(self, resource_group_name: str):
        for permission in self.get_principal_permissions_for_group(resource_group_name=resource_group_name):
            action_result = False
            negate_action_result = False

            for action in permission.actions or []:
                if action.lower() in VALID_PERM_FORMS:
                    action_result = True
                    break

            for not_action in permission.not_actions or []:
                if not_action.lower() in VALID_PERM_FORMS:
                    negate_action_result = True
                    break

            if action_result and not negate_action_result:
                return

        raise ValidationError(
            "Provisioning binds the cluster managed identity to a role, which requires the logged-in principal\n"
            "to have permission to write role assignments (Microsoft.Authorization/roleAssignments/write) "
            f"against the resource group '{resource_group_name}'.\n"
        )

    def get_principal_permissions_for_group(self, resource_group_name: str) -> Iterable:
        return self.authz_client.permissions.list_for_resource_group(resource_group_name=resource_group_name)

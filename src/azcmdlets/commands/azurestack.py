"""
Azure Stack admin commands.

Commands:
    Set-ResourceProviderRegistration: Register a resource provider by
        regional manifest (ByManifest) or by manifest endpoint (ByEndpoint)
    Get-ResourceProviderRegistration, Remove-ResourceProviderRegistration
    Set-AzureStackEnvironment: Add the Azure Stack environment to the
        profile and make it current
"""

import json
import logging
import uuid

from ..clients.models import (
    ProviderRegistration,
    ProviderRegistrationProperties,
    RegionalManifest,
    ResourceProviderEndpoint,
)
from ..core.cmdlet import AdminApiCmdlet, AzureRMCmdlet
from ..core.exceptions import InvalidOperationError
from ..core.parameters import (
    Parameter,
    ValidateAbsoluteUri,
    ValidateGuidNotEmpty,
    ValidateJson,
    ValidateLength,
    ValidateNotNull,
    ValidateNotNullOrEmpty,
)
from ..core.registry import CommandRegistry
from ..core.session import AzureContext, AzureEnvironment, AzureSession, AzureTenant, Endpoint
from .. import constants as CONSTANTS

logger = logging.getLogger(__name__)

BY_MANIFEST = "ByManifest"
BY_ENDPOINT = "ByEndpoint"


@CommandRegistry.register
class SetResourceProviderRegistration(AdminApiCmdlet):
    """
    Create or update a resource provider registration.

    Before the PUT the target resource group must exist and no registration
    with the same name and location may exist in it.
    """

    verb, noun = "Set", "ResourceProviderRegistration"
    default_parameter_set = BY_MANIFEST

    name = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST, BY_ENDPOINT],
                     validators=[ValidateNotNull(), ValidateLength(1, 128)])
    namespace = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST, BY_ENDPOINT],
                          validators=[ValidateNotNull(), ValidateLength(1, 128)])
    resource_group = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST, BY_ENDPOINT],
                               validators=[ValidateNotNull(), ValidateLength(1, 90)])
    arm_location = Parameter(mandatory=True, validators=[ValidateNotNull()])
    display_name = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST, BY_ENDPOINT],
                             validators=[ValidateNotNull(), ValidateLength(1, 128)])
    subscription_id = Parameter(parameter_sets=[BY_MANIFEST, BY_ENDPOINT], type=uuid.UUID,
                                validators=[ValidateNotNull(), ValidateGuidNotEmpty()])
    location = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST, BY_ENDPOINT],
                         validators=[ValidateNotNull()])
    manifest_endpoint = Parameter(mandatory=True, parameter_sets=[BY_ENDPOINT],
                                  validators=[ValidateNotNull(), ValidateAbsoluteUri()])
    user_name = Parameter(parameter_sets=[BY_ENDPOINT], validators=[ValidateNotNull()])
    password = Parameter(parameter_sets=[BY_ENDPOINT], validators=[ValidateNotNull()])
    regional_manifest = Parameter(mandatory=True, parameter_sets=[BY_MANIFEST],
                                  validators=[ValidateNotNull(), ValidateJson()])

    def build_registration(self) -> ProviderRegistration:
        properties = ProviderRegistrationProperties(
            display_name=self.display_name,
            name=self.name,
            namespace=self.namespace,
            enabled=True,
            location=self.location,
        )
        if self.parameter_set_name == BY_ENDPOINT:
            properties.manifest_endpoint = ResourceProviderEndpoint(
                endpoint_uri=self.manifest_endpoint,
                authentication_username=self.user_name,
                authentication_password=self.password,
            )
        else:
            properties.manifest = RegionalManifest.model_validate(json.loads(self.regional_manifest))

        return ProviderRegistration(name=self.name, location=self.arm_location, properties=properties)

    def execute_core(self):
        client = self.get_azure_stack_client(self.subscription_id)
        registration = self.build_registration()

        self.write_verbose(f"Adding resource provider registration '{registration.properties.name}'")
        self.validate_prerequisites(client, registration)

        created = client.provider_registrations.create_or_update(self.resource_group, registration)
        logger.info(f"✓ Provider registration {registration.name} created in {self.resource_group}")
        return created

    def validate_prerequisites(self, client, registration: ProviderRegistration) -> None:
        """
        Raises:
            InvalidOperationError: If the resource group is missing or the
                registration already exists for this location
        """
        groups = client.resource_groups.list()
        if not any(g.name.lower() == self.resource_group.lower() for g in groups):
            raise InvalidOperationError(
                f"Resource group '{self.resource_group}' does not exist.",
                command=self.cmdlet_name
            )

        name = registration.properties.name.lower()
        location = registration.properties.location.lower()
        for existing in client.provider_registrations.list(self.resource_group):
            if (existing.registered_name or "").lower() == name and (existing.properties.location or "").lower() == location:
                raise InvalidOperationError(
                    f"Provider registration '{registration.properties.name}' already exists "
                    f"in location '{registration.properties.location}'.",
                    command=self.cmdlet_name
                )


@CommandRegistry.register
class GetResourceProviderRegistration(AdminApiCmdlet):
    verb, noun = "Get", "ResourceProviderRegistration"

    resource_group = Parameter(mandatory=True, validators=[ValidateLength(1, 90)])
    name = Parameter(validators=[ValidateLength(1, 128)])
    subscription_id = Parameter(type=uuid.UUID, validators=[ValidateGuidNotEmpty()])

    def execute_core(self):
        client = self.get_azure_stack_client(self.subscription_id)
        if self.name:
            return client.provider_registrations.get(self.resource_group, self.name)
        return client.provider_registrations.list(self.resource_group)


@CommandRegistry.register
class RemoveResourceProviderRegistration(AdminApiCmdlet):
    verb, noun = "Remove", "ResourceProviderRegistration"

    resource_group = Parameter(mandatory=True, validators=[ValidateLength(1, 90)])
    name = Parameter(mandatory=True, validators=[ValidateLength(1, 128)])
    subscription_id = Parameter(type=uuid.UUID, validators=[ValidateGuidNotEmpty()])

    def execute_core(self):
        client = self.get_azure_stack_client(self.subscription_id)
        self.write_verbose(f"Removing resource provider registration '{self.name}'")
        client.provider_registrations.delete(self.resource_group, self.name)
        logger.info(f"✓ Provider registration {self.name} removed")
        return None


@CommandRegistry.register
class SetAzureStackEnvironment(AzureRMCmdlet):
    """
    Register the Azure Stack environment and switch the context to it.

    Without AAD parameters the endpoints are derived from the machine name
    (https://api.<machine>.local/ and friends).
    """

    verb, noun = "Set", "AzureStackEnvironment"

    azure_stack_machine_name = Parameter(mandatory=True, validators=[ValidateNotNullOrEmpty()])
    aad_tenant_id = Parameter()
    aad_application_id = Parameter()
    arm_endpoint = Parameter(validators=[ValidateAbsoluteUri()])
    gallery_endpoint = Parameter(validators=[ValidateAbsoluteUri()])
    aad_graph_uri = Parameter(validators=[ValidateAbsoluteUri()])
    aad_login_uri = Parameter(validators=[ValidateAbsoluteUri()])

    def build_environment(self) -> AzureEnvironment:
        machine = self.azure_stack_machine_name
        arm_endpoint = self.arm_endpoint or f"https://api.{machine}.local/"

        environment = AzureEnvironment(name=CONSTANTS.AZURE_STACK_ENVIRONMENT_NAME)
        environment.set_endpoint(Endpoint.RESOURCE_MANAGER, arm_endpoint)
        environment.set_endpoint(Endpoint.GALLERY, self.gallery_endpoint or f"https://portal.{machine}.local:30016/")
        environment.set_endpoint(Endpoint.ACTIVE_DIRECTORY, self.aad_login_uri or CONSTANTS.AZURE_CLOUD_ENDPOINTS["ActiveDirectory"])
        environment.set_endpoint(Endpoint.GRAPH, self.aad_graph_uri or CONSTANTS.AZURE_CLOUD_ENDPOINTS["Graph"])
        environment.set_endpoint(Endpoint.ACTIVE_DIRECTORY_RESOURCE_ID, self.aad_application_id or arm_endpoint)
        return environment

    def execute_cmdlet(self):
        profile = AzureSession.get_profile()
        environment = profile.add_or_set_environment(self.build_environment())

        current = AzureSession.get_context()
        if current is not None:
            tenant = current.tenant
            if self.aad_tenant_id:
                try:
                    tenant = AzureTenant(id=uuid.UUID(self.aad_tenant_id))
                except ValueError:
                    tenant = AzureTenant(id=current.tenant.id, domain=self.aad_tenant_id)
            profile.context = AzureContext(current.subscription, current.account, environment, tenant)

        profile.save()
        logger.info(f"✓ Environment {environment.name} set ({environment.get_endpoint(Endpoint.RESOURCE_MANAGER)})")
        self.write_object(environment)

"""Context commands: which subscription, tenant and environment commands run against."""

import logging
import uuid

from ..core.cmdlet import AzureRMCmdlet
from ..core.exceptions import InvalidOperationError
from ..core.parameters import Parameter, ValidateGuidNotEmpty, ValidateNotNullOrEmpty
from ..core.registry import CommandRegistry
from ..core.session import AzureContext, AzureSubscription, AzureTenant, AzureSession

logger = logging.getLogger(__name__)


@CommandRegistry.register
class GetAzureContext(AzureRMCmdlet):
    verb, noun = "Get", "AzureContext"

    def execute_cmdlet(self):
        self.write_object(self.default_context)


@CommandRegistry.register
class SetAzureContext(AzureRMCmdlet):
    """Select the subscription (by id or by name) and optionally the tenant."""

    verb, noun = "Set", "AzureContext"
    default_parameter_set = "BySubscriptionId"

    subscription_id = Parameter(
        mandatory=True,
        parameter_sets=["BySubscriptionId"],
        type=uuid.UUID,
        validators=[ValidateGuidNotEmpty()]
    )
    subscription_name = Parameter(
        mandatory=True,
        parameter_sets=["BySubscriptionName"],
        validators=[ValidateNotNullOrEmpty()]
    )
    tenant_id = Parameter(type=uuid.UUID)

    def execute_cmdlet(self):
        profile = AzureSession.get_profile()
        current = self.default_context

        if self.parameter_set_name == "BySubscriptionName":
            matches = [s for s in profile.subscriptions.values() if s.name == self.subscription_name]
            if not matches:
                raise InvalidOperationError(
                    f"Subscription '{self.subscription_name}' was not found in the profile.",
                    command=self.cmdlet_name
                )
            subscription = matches[0]
        else:
            subscription = profile.subscriptions.get(self.subscription_id)
            if subscription is None:
                subscription = AzureSubscription(
                    id=self.subscription_id,
                    environment=current.environment.name,
                    account=current.account.id
                )
                profile.subscriptions[subscription.id] = subscription

        environment = profile.environments.get(subscription.environment, current.environment)
        tenant = AzureTenant(id=self.tenant_id) if self.tenant_id else current.tenant

        profile.context = AzureContext(subscription, current.account, environment, tenant)
        profile.save()
        logger.info(f"✓ Context set to subscription {subscription.id}")
        self.write_object(profile.context)

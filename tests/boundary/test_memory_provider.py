"""
Test suite for the in-memory provider and the provider factory.

Tests physical id assignment, derived outputs, update/delete semantics
and fault injection.

System role: Verification of the simulated control plane
"""

import asyncio

import pytest

from reconciler.boundary.provider import InMemoryProvider, ResourceProvider, get_provider
from reconciler.configs import ProviderSettings
from reconciler.core.exceptions import ProviderOperationError, ProviderThrottlingError
from reconciler.models import ResourceKind


class TestInMemoryProviderCreate:
    """Test suite for InMemoryProvider.create()."""

    def test_provider_should_satisfy_protocol(self, provider: InMemoryProvider) -> None:
        assert isinstance(provider, ResourceProvider)

    @pytest.mark.asyncio
    async def test_create_should_assign_kind_prefixed_ids(self, provider: InMemoryProvider) -> None:
        """Test physical ids follow the kind's id format and never repeat."""
        # Act
        vpc = await provider.create(ResourceKind.NETWORK, "Vpc", {"cidr_block": "10.0.0.0/16"})
        other = await provider.create(ResourceKind.NETWORK, "Vpc2", {})
        role = await provider.create(ResourceKind.ROLE, "Role", {})

        # Assert
        assert vpc.physical_id.startswith("vpc-")
        assert other.physical_id != vpc.physical_id
        assert role.physical_id.startswith("AROA")
        assert vpc.outputs["cidr_block"] == "10.0.0.0/16"
        assert vpc.outputs["id"] == vpc.physical_id
        assert vpc.outputs["arn"] == f"arn:aws:ec2:us-east-1:123456789012:network/{vpc.physical_id}"

    @pytest.mark.asyncio
    async def test_create_database_should_expose_endpoint_and_port(self, provider: InMemoryProvider) -> None:
        result = await provider.create(ResourceKind.DATABASE, "Db", {"identifier": "techhealth-db"})

        assert result.outputs["endpoint"].startswith("techhealth-db.")
        assert result.outputs["endpoint"].endswith(".us-east-1.rds.amazonaws.com")
        assert result.outputs["port"] == 3306

    @pytest.mark.asyncio
    async def test_create_role_should_expose_iam_arn_and_name(self, provider: InMemoryProvider) -> None:
        result = await provider.create(ResourceKind.ROLE, "Role", {"name": "app-role"})

        assert result.outputs["arn"] == "arn:aws:iam::123456789012:role/app-role"
        assert result.outputs["name"] == "app-role"

    @pytest.mark.asyncio
    async def test_create_compute_should_expose_addresses(self, provider: InMemoryProvider) -> None:
        result = await provider.create(ResourceKind.COMPUTE, "App", {"instance_type": "t3.micro"})

        assert result.outputs["private_ip"].startswith("10.0.")
        assert result.physical_id in result.outputs["public_dns"]

    @pytest.mark.asyncio
    async def test_outputs_should_not_alias_provider_state(self, provider: InMemoryProvider) -> None:
        """Test mutating returned outputs leaves the simulated resource intact."""
        properties = {"tags": {"Name": "a"}}
        result = await provider.create(ResourceKind.NETWORK, "Vpc", properties)

        result.outputs["tags"]["Name"] = "changed"
        properties["tags"]["Name"] = "changed"

        assert provider.find("Vpc").properties["tags"]["Name"] == "a"


class TestInMemoryProviderUpdateDelete:
    """Test suite for update and delete."""

    @pytest.mark.asyncio
    async def test_update_should_keep_physical_id(self, provider: InMemoryProvider) -> None:
        created = await provider.create(ResourceKind.COMPUTE, "App", {"instance_type": "t3.micro"})

        updated = await provider.update(
            ResourceKind.COMPUTE, created.physical_id, {"instance_type": "t3.small"}, ["instance_type"]
        )

        assert updated.physical_id == created.physical_id
        assert updated.outputs["instance_type"] == "t3.small"
        assert provider.operations("App") == ["create", "update"]

    @pytest.mark.asyncio
    async def test_update_missing_resource_should_fail(self, provider: InMemoryProvider) -> None:
        with pytest.raises(ProviderOperationError):
            await provider.update(ResourceKind.COMPUTE, "i-missing", {}, [])

    @pytest.mark.asyncio
    async def test_delete_should_remove_and_tolerate_missing(self, provider: InMemoryProvider) -> None:
        created = await provider.create(ResourceKind.SUBNET, "Sub", {})

        await provider.delete(ResourceKind.SUBNET, created.physical_id)
        await provider.delete(ResourceKind.SUBNET, created.physical_id)

        assert provider.resources == {}
        assert provider.operations("Sub") == ["create", "delete", "delete"]


class TestInMemoryProviderFaults:
    """Test suite for fault injection."""

    @pytest.mark.asyncio
    async def test_fail_on_should_raise_permanent_error(self, provider: InMemoryProvider) -> None:
        provider.fail_on("create", "Vpc", "VpcLimitExceeded")

        with pytest.raises(ProviderOperationError) as exc_info:
            await provider.create(ResourceKind.NETWORK, "Vpc", {})

        assert exc_info.value.message == "VpcLimitExceeded"
        assert exc_info.value.transient is False
        assert provider.resources == {}
        assert provider.in_flight == 0

    @pytest.mark.asyncio
    async def test_fail_on_physical_id_should_target_delete(self, provider: InMemoryProvider) -> None:
        created = await provider.create(ResourceKind.NETWORK, "Vpc", {})
        provider.fail_on("delete", created.physical_id)

        with pytest.raises(ProviderOperationError):
            await provider.delete(ResourceKind.NETWORK, created.physical_id)

        assert created.physical_id in provider.resources

    @pytest.mark.asyncio
    async def test_throttle_should_fail_a_limited_number_of_times(self, provider: InMemoryProvider) -> None:
        provider.throttle("create", "Vpc", times=1)

        with pytest.raises(ProviderThrottlingError) as exc_info:
            await provider.create(ResourceKind.NETWORK, "Vpc", {})
        result = await provider.create(ResourceKind.NETWORK, "Vpc", {})

        assert exc_info.value.transient is True
        assert result.physical_id.startswith("vpc-")

    @pytest.mark.asyncio
    async def test_hang_should_block_until_cancelled(self, provider: InMemoryProvider) -> None:
        provider.hang("create", "Vpc")

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(provider.create(ResourceKind.NETWORK, "Vpc", {}), timeout=0.05)

        assert provider.in_flight == 0

    @pytest.mark.asyncio
    async def test_clear_faults_should_restore_normal_behaviour(self, provider: InMemoryProvider) -> None:
        provider.fail_on("create", "Vpc")
        provider.clear_faults()

        result = await provider.create(ResourceKind.NETWORK, "Vpc", {})

        assert result.physical_id in provider.resources


class TestGetProvider:
    """Test suite for get_provider()."""

    def test_get_provider_should_build_memory_provider_from_settings(self) -> None:
        provider = get_provider(ProviderSettings(provider_type="memory", region="eu-west-1", account_id="999"))

        assert isinstance(provider, InMemoryProvider)
        assert provider.region == "eu-west-1"
        assert provider.account_id == "999"

    def test_get_provider_should_reject_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Invalid PROVIDER_PROVIDER_TYPE"):
            get_provider(ProviderSettings(provider_type="gcp"))

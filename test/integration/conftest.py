from collections.abc import AsyncGenerator, Generator
from os import environ

import aioboto3
import docker  # type: ignore[import-untyped]
from docker.errors import DockerException  # type: ignore[import-untyped]
from pytest import fixture, skip
from pytest_asyncio import fixture as async_fixture
from testcontainers.core.container import DockerContainer  # type: ignore[import-untyped]
from testcontainers.core.wait_strategies import (  # type: ignore[import-untyped]
    HttpWaitStrategy,
)
from types_aiobotocore_dynamodb.service_resource import (
    DynamoDBServiceResource as AsyncDynamoDBServiceResource,
    Table as AsyncTable,
)

from powered_dynamo.config import PoweredDynamoConfig, RetrySettings
from powered_dynamo.store import PoweredDynamo


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except DockerException:
        return False
    return True


@fixture(scope="session", autouse=True)
def aws_credentials() -> None:
    environ["AWS_ACCESS_KEY_ID"] = "testing"
    environ["AWS_SECRET_ACCESS_KEY"] = "testing"  # noqa: S105
    environ["AWS_SECURITY_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_SESSION_TOKEN"] = "testing"  # noqa: S105
    environ["AWS_DEFAULT_REGION"] = "us-east-1"


@fixture(scope="session")
def dynamodb_endpoint(aws_credentials: None) -> Generator[str, None, None]:
    """Session-scoped DynamoDB Local container providing its endpoint URL."""
    if not _docker_available():
        skip("Docker is not available")
    with DockerContainer(
        "amazon/dynamodb-local:latest",
        ports=[8000],
        _wait_strategy=HttpWaitStrategy(8000).for_status_code(400),
    ) as container:
        yield f"http://localhost:{container.get_exposed_port(8000)}"


@async_fixture
async def dynamodb(
    dynamodb_endpoint: str,
) -> AsyncGenerator[AsyncDynamoDBServiceResource, None]:
    """Function-scoped aioboto3 resource reusing the session-scoped endpoint."""
    session = aioboto3.Session()
    async with session.resource("dynamodb", endpoint_url=dynamodb_endpoint) as dynamodb:
        yield dynamodb


@async_fixture
async def pk_table(dynamodb: AsyncDynamoDBServiceResource) -> AsyncGenerator[AsyncTable, None]:
    table = await dynamodb.create_table(
        TableName="PKTable",
        KeySchema=[
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    await table.wait_until_exists()

    yield table

    await table.delete()


@async_fixture
async def pk_sk_table(dynamodb: AsyncDynamoDBServiceResource) -> AsyncGenerator[AsyncTable, None]:
    table = await dynamodb.create_table(
        TableName="PKSKTable",
        KeySchema=[
            {"AttributeName": "id", "KeyType": "HASH"},
            {"AttributeName": "sort", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "sort", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    await table.wait_until_exists()

    yield table

    await table.delete()


@fixture
def retried_errors() -> list[BaseException]:
    return []


@async_fixture
async def store(
    dynamodb: AsyncDynamoDBServiceResource,
    retried_errors: list[BaseException],
) -> PoweredDynamo:
    return PoweredDynamo(
        dynamodb.meta.client,
        config=PoweredDynamoConfig(retry=RetrySettings(wait_times=(0.05, 0.1))),
        on_retryable_error=retried_errors.append,
    )

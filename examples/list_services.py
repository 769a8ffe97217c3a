"""List services and their operations known to a Jaeger query service.

    JAEGER_URL=localhost python examples/list_services.py
"""

import asyncio
import json
import logging

import jaeger_query


async def main() -> None:
    # 1. Configure from JAEGER_* environment variables
    config = jaeger_query.ClientConfig.from_env()
    if config.debug:
        logging.basicConfig(level=logging.DEBUG)

    # 2. Query services, then operations for each one
    async with jaeger_query.create_client(config) as client:
        services = await client.get_services(jaeger_query.GetServicesRequest())
        result = {}
        for service in services.services:
            ops = await client.get_operations(
                jaeger_query.GetOperationsRequest(service=service)
            )
            result[service] = jaeger_query.as_json(ops.operations)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    asyncio.run(main())

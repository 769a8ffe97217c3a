"""Search the last hour of traces for a service.

    JAEGER_URL=localhost JAEGER_PROTOCOL=http python examples/find_traces.py frontend
"""

import asyncio
import json
import sys
import time

import jaeger_query


async def main(service: str) -> None:
    now_ms = int(time.time() * 1000)
    query = jaeger_query.TraceQueryParameters(
        service_name=service,
        start_time_min=now_ms - 3_600_000,
        start_time_max=now_ms,
        attributes={"error": True},
        search_depth=20,
    )

    config = jaeger_query.ClientConfig.from_env()
    async with jaeger_query.create_client(config) as client:
        found = await client.find_traces(jaeger_query.FindTracesRequest(query=query))

    trace_ids = sorted(
        {
            span.trace_id
            for rs in found.resource_spans
            for ss in rs.scope_spans
            for span in ss.spans
        }
    )
    print(json.dumps({"traceIds": trace_ids}, indent=2))


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "frontend"))

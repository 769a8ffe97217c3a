"""Fetch one trace by ID and print it as canonical JSON.

    JAEGER_URL=localhost python examples/get_trace.py 014c2d3d2f2bc95b145834e7c6063744
"""

import asyncio
import json
import sys

import jaeger_query


async def main(trace_id: str) -> int:
    try:
        jaeger_query.validate_trace_id(trace_id)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    config = jaeger_query.ClientConfig.from_env()
    async with jaeger_query.create_client(config) as client:
        try:
            trace = await client.get_trace(jaeger_query.GetTraceRequest(trace_id=trace_id))
        except jaeger_query.JaegerQueryError as e:
            print(f"{e.kind.value}: {e.message}", file=sys.stderr)
            return 1

    if not trace.resource_spans:
        print(f"Trace {trace_id} not found", file=sys.stderr)
        return 1
    print(json.dumps(jaeger_query.as_json(trace), indent=2))
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: get_trace.py <trace-id>", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1])))

"""List the MCP tools exposed at /mcp and run one billing report through them."""
import asyncio
import json
import os

from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamablehttp_client


async def main():
    url = os.getenv("JUMJUM_MCP_URL", "http://127.0.0.1:8000/mcp/")

    async with streamablehttp_client(url) as (read, write, _):
        async with ClientSession(read, write) as session:
            await session.initialize()
            tools = await session.list_tools()
            print("TOOLS:", [tool.name for tool in tools.tools])

            result = await session.call_tool(
                "billing_report",
                {"input": {"period": os.getenv("JUMJUM_MCP_PERIOD", "today"), "category": "all"}},
            )
            for block in result.content:
                text = getattr(block, "text", None)
                if text:
                    print(json.dumps(json.loads(text), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())

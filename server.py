"""
MCP Server Entry Point for the Productivity Tracker
Run with: python server.py
"""

import asyncio
import logging
import os
import sys
from typing import Any

from mcp.server.models import InitializationOptions
from mcp.server import NotificationOptions, Server
from mcp.server.stdio import stdio_server
from mcp import types

from database import DatabaseConnection
from config import DatabaseConfig, RecommendationConfig, get_log_level
from container import RepositoryContainer
from llm_clients import create_llm_client

__version__ = "1.0.0"

SERVER_NAME = "productivity-mcp-server"

logger = logging.getLogger(__name__)

# Initialize server
app = Server(SERVER_NAME)
db: DatabaseConnection = None
repos: RepositoryContainer = None


@app.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """
    List available MCP tools.

    - Time tracking: day logs, entries, stats, comparison, dashboard
    - Analysis: generate, get and list productivity reports
    - Coaching: AI insights and optimal schedule
    """
    from tools import get_core_tool_catalog
    return get_core_tool_catalog()


@app.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any]
) -> list[types.TextContent]:
    """
    Route a tool call to its handler.

    Handlers turn expected failures into error payloads themselves; anything
    that escapes is logged here and reported with an enhanced message.
    """
    try:
        from handlers import get_handler

        handler = get_handler(name)

        if not handler:
            return [types.TextContent(
                type="text",
                text=f"Unknown tool: {name}"
            )]

        return await handler(arguments or {}, repos)

    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        from utils.error_messages import enhance_error_message
        enhanced_msg = enhance_error_message(e)
        return [types.TextContent(
            type="text",
            text=f"Error executing {name}: {enhanced_msg}"
        )]


async def main():
    """Main entry point for MCP server"""
    global db, repos

    llm_client = None
    try:
        # config.py loads .env.{APP_ENV} before reading variables
        config = DatabaseConfig.from_environment()
        env_mode = os.getenv('APP_ENV', 'development')

        db = DatabaseConnection(config)
        await db.connect()
        if not await db.check_connection():
            raise RuntimeError(f"Database {config.database} is not answering queries")

        recommendation_config = RecommendationConfig.from_environment()
        if recommendation_config.enabled:
            llm_client = create_llm_client(recommendation_config)
            await llm_client.initialize()
            logger.info(f"Recommendations enabled ({recommendation_config.provider.value}: {recommendation_config.model})")
        else:
            logger.info("Recommendations disabled; analyses will have no recommendations")

        repos = RepositoryContainer(db, llm_client=llm_client, recommendation_config=recommendation_config)

        logger.info("Productivity MCP Server starting...")
        logger.info(f"Environment: {env_mode}")

        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=app.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )
    except Exception as e:
        logger.error(f"Failed to start MCP server: {e}", exc_info=True)
        raise
    finally:
        if llm_client:
            await llm_client.close()
        if db:
            await db.disconnect()
            logger.info("Database connection closed")


def cli_entry():
    """Entry point for console script - wraps async main()"""
    import argparse

    parser = argparse.ArgumentParser(description="Productivity MCP Server")
    parser.add_argument('--version', '-v', action='store_true', help='Show version')
    parser.add_argument('--init-db', action='store_true', help='Apply schema.sql to the configured database and exit')

    args = parser.parse_args()

    if args.version:
        print(f"{SERVER_NAME} version {__version__}")
        sys.exit(0)

    # stdout carries the MCP stdio transport; logs go to stderr
    logging.basicConfig(level=get_log_level(), stream=sys.stderr)

    if args.init_db:
        asyncio.run(init_db())
        return

    logger.info("Starting in stdio mode...")
    asyncio.run(main())


async def init_db():
    """Create the tables and indexes from schema.sql"""
    database = DatabaseConnection(DatabaseConfig.from_environment())
    await database.connect()
    try:
        await database.apply_schema()
    finally:
        await database.disconnect()


if __name__ == "__main__":
    cli_entry()

# =============================================================================
# agent/docs_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that answers SAP questions by calling the
#   FastMCP tools in tools/mcp_server.py.
#
# HOW IT FITS TOGETHER:
#
#   ┌──────────────────────────────────────────────────────┐
#   │                  Google ADK Agent                    │
#   │  System prompt ──▶ LLM (LiteLlm) ──▶ MCPToolset      │
#   └──────────────────────────────────────────────────────┘
#                                              │ stdio
#                                              ▼
#                                  ┌──────────────────────┐
#                                  │ FastMCP server       │
#                                  │  • sap_help_search   │
#                                  │  • sap_help_get      │
#                                  └──────────────────────┘
#                                              │
#                                              ▼
#                                  ┌──────────────────────┐
#                                  │ core/sap_help.py     │
#                                  │ search → metadata →  │
#                                  │ page → text → trim   │
#                                  └──────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess ("uv run python -m
#   tools.mcp_server" from the project root) and talks to it over
#   stdin/stdout.  The tools are discovered automatically.
#
# MODEL:
#   Any LiteLlm model string works; the default is OpenAI GPT-4o through
#   OpenRouter ("openrouter/openai/gpt-4o", needs OPENROUTER_API_KEY).
#   Override with AGENT_MODEL.
# =============================================================================

import os
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_docs_assistant_prompt
from core.config import Settings, load_settings

AGENT_NAME = "sap_help_assistant"
MCP_SERVER_MODULE = "tools.mcp_server"


def project_root() -> str:
    """Absolute path of the directory holding agent/, core/ and tools/."""
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_agent(settings: Optional[Settings] = None) -> Agent:
    """Create the SAP Help assistant.

    Args:
        settings: Runtime configuration; read from the environment if omitted.

    Returns:
        A configured Google ADK Agent whose only tools are the two SAP Help
        tools served over MCP.
    """
    if settings is None:
        settings = load_settings()

    # Run as a module from the project root so "core" and "tools" import
    # the same way they do under pytest.
    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", MCP_SERVER_MODULE],
            cwd=project_root(),
        ),
    )

    return Agent(
        name=AGENT_NAME,
        model=LiteLlm(model=settings.agent_model),
        instruction=get_docs_assistant_prompt(),
        tools=[mcp_tools],
    )

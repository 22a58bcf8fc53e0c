"""
Tests for the assistant wiring.  The ADK classes are replaced with mocks so
no subprocess is started and no model is called.
"""

import os
from unittest.mock import patch

from agent import docs_agent
from agent.prompt import get_docs_assistant_prompt
from core.config import Settings


class TestPrompt:
    """Tests for the system prompt."""

    def test_mentions_both_tools(self):
        prompt = get_docs_assistant_prompt()
        assert "sap_help_search" in prompt
        assert "sap_help_get" in prompt

    @patch("agent.prompt.date")
    def test_injects_today(self, mock_date):
        mock_date.today.return_value.isoformat.return_value = "2026-10-18"
        assert "TODAY'S DATE: 2026-10-18" in get_docs_assistant_prompt()


class TestCreateAgent:
    """Tests for create_agent."""

    @patch("agent.docs_agent.Agent")
    @patch("agent.docs_agent.LiteLlm")
    @patch("agent.docs_agent.MCPToolset")
    @patch("agent.docs_agent.StdioServerParameters")
    def test_wires_model_and_tool_server(self, mock_params, mock_toolset, mock_llm, mock_agent):
        agent = docs_agent.create_agent(Settings(agent_model="openai/gpt-4o-mini"))

        mock_params.assert_called_once_with(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=docs_agent.project_root(),
        )
        mock_toolset.assert_called_once_with(connection_params=mock_params.return_value)
        mock_llm.assert_called_once_with(model="openai/gpt-4o-mini")

        kwargs = mock_agent.call_args.kwargs
        assert kwargs["name"] == "sap_help_assistant"
        assert kwargs["model"] is mock_llm.return_value
        assert kwargs["tools"] == [mock_toolset.return_value]
        assert "sap_help_search" in kwargs["instruction"]
        assert agent is mock_agent.return_value

    def test_project_root_contains_packages(self):
        root = docs_agent.project_root()
        for package in ("agent", "core", "tools"):
            assert os.path.isdir(os.path.join(root, package))

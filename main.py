# =============================================================================
# main.py  —  Entry Point for the SAP Help Assistant
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Creates the Google ADK agent (agent/docs_agent.py)
#   2. ADK spawns the FastMCP tool server (tools/mcp_server.py) over stdio
#   3. Each question you type goes to the agent
#   4. The agent searches the SAP Help Portal, reads pages, and answers
#   5. Tool calls are printed as they happen, then the final answer
#
# To use only the tools (e.g. from another MCP client), run
#   uv run python -m tools.mcp_server
# instead.
# =============================================================================

import asyncio

from dotenv import load_dotenv

# LiteLlm reads OPENROUTER_API_KEY (or the key for AGENT_MODEL's provider)
# from the environment, so .env must be loaded before the agent exists.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.docs_agent import create_agent

APP_NAME = "sap_help_assistant"
USER_ID = "demo_user"


async def run_agent():
    """Run the SAP Help assistant interactively."""
    print("=" * 70)
    print("  SAP HELP ASSISTANT")
    print("  Powered by Google ADK + FastMCP + help.sap.com")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=USER_ID,
    )

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask anything about SAP products and their documentation.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        final_response = ""
        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text

                    if getattr(part, "function_call", None):
                        call = part.function_call
                        print(f"  🔧 Calling tool: {call.name} {dict(call.args or {})}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())

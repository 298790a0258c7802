"""Claude Cowork integration: research companies interactively with Claude
calling the company information tools directly (no MCP transport in between).

Usage:
    from src.cowork import CoworkSession
    session = CoworkSession()
    session.run_interactive()
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Optional

import anthropic

from src.config import Settings
from src.dispatcher import DEFAULT_VARIANT, VARIANTS, ToolDispatcher
from src.errors import ToolError
from src.models import ToolRequest
from tools.definitions import tools_for_variant

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# System prompt for the Cowork orchestrator
# ---------------------------------------------------------------------------

COWORK_SYSTEM = """\
You are a business-development research assistant working inside Claude Cowork.
You help users learn about companies in Belgium and the Netherlands: their
profile, their recent LinkedIn activity, their open technical positions and
how to reach the right people.

Some tools start a data collection and return a snapshot_id.  Collections take
a few minutes.  Keep the snapshot_id and call the matching get_* tool with it
to check progress; repeat the check until the status is "ready".

Be concise and factual.  Never invent company data that the tools did not
return.
"""

MAX_TOKENS = 4096


# ---------------------------------------------------------------------------
# Cowork Session
# ---------------------------------------------------------------------------


class CoworkSession:
    """Interactive session that lets Claude use the company information tools."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        variant: str = DEFAULT_VARIANT,
        dispatcher: Optional[ToolDispatcher] = None,
    ):
        self.settings = settings or Settings.from_env()
        if not self.settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY required")

        self.model = self.settings.anthropic_model
        self.client = anthropic.Anthropic(api_key=self.settings.anthropic_api_key)
        self.dispatcher = dispatcher or ToolDispatcher.for_variant(variant, self.settings)
        self.tools = tools_for_variant(variant)
        self.messages: list[dict] = []

    async def chat(self, user_message: str) -> str:
        """Send a user message and process the response (including tool calls)."""
        self.messages.append({"role": "user", "content": user_message})

        # Keep going while the model asks for tools
        while True:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=COWORK_SYSTEM,
                tools=self.tools,
                messages=self.messages,
            )

            assistant_content = response.content
            self.messages.append({"role": "assistant", "content": assistant_content})

            tool_uses = [b for b in assistant_content if b.type == "tool_use"]
            if not tool_uses:
                text_parts = [b.text for b in assistant_content if hasattr(b, "text")]
                return "\n".join(text_parts)

            tool_results = []
            for tool_use in tool_uses:
                result_text, is_error = await self._execute_tool(tool_use.name, tool_use.input)
                tool_results.append(
                    {
                        "type": "tool_result",
                        "tool_use_id": tool_use.id,
                        "content": result_text,
                        "is_error": is_error,
                    }
                )

            self.messages.append({"role": "user", "content": tool_results})

    async def _execute_tool(self, name: str, args: dict) -> tuple[str, bool]:
        """Execute a tool call and return ``(result_text, is_error)``."""
        logger.info("Executing tool: %s", name)

        try:
            result = await self.dispatcher.execute(ToolRequest(name=name, arguments=args or {}))
        except ToolError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return json.dumps({"error": str(exc), "code": exc.code}), True

        return json.dumps(result, indent=2, ensure_ascii=False), False

    def run_interactive(self) -> None:
        """Run an interactive terminal session."""
        print("=" * 60)
        print("  Company Research: Claude Cowork Session")
        print("  Type 'quit' or 'exit' to end the session.")
        print("=" * 60)
        print()

        async def _loop():
            while True:
                try:
                    user_input = input("You: ").strip()
                except (EOFError, KeyboardInterrupt):
                    print("\nGoodbye!")
                    break

                if not user_input:
                    continue
                if user_input.lower() in ("quit", "exit"):
                    print("Goodbye!")
                    break

                print("\nAssistant: ", end="", flush=True)
                response = await self.chat(user_input)
                print(response)
                print()

        asyncio.run(_loop())


# ---------------------------------------------------------------------------
# Standalone entry-point
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(prog="company-info-cowork")
    parser.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    session = CoworkSession(variant=args.variant)
    session.run_interactive()


if __name__ == "__main__":
    main()

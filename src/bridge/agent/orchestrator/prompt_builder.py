"""
Prompt Builder for the bridge session.

Encapsulates system prompt construction:
- Listing the available tools
- The response-encoding contract of the active protocol
- Guardrails for browser automation tools
- Output style for text that will be spoken aloud
"""

from __future__ import annotations

import logging
from typing import Optional

from ..domain.entities import ToolDefinition

logger = logging.getLogger(__name__)


BASE_PROMPT = "You are an assistant connected to an MCP server that controls tools on the user's behalf."

GUARDRAILS = """CRITICAL RULES - Follow these strictly:
1. NEVER take screenshots unless the user explicitly asks for one.
2. When searching on a website (Google, etc.), ALWAYS type into the site's search input field. DO NOT put the query in URL parameters such as "?q=".
3. Only use tools that were requested or are necessary for the user's specific task. Do not perform additional actions that were not asked for.
4. Think step by step: what did the user ask for, and what is the minimum set of tools needed?
5. To search on a website: navigate to its main page, locate the search input, type the query, then submit it (press Enter or click the search button).
6. Do not assume the user wants extra features or actions beyond their request.
7. Do not use tools far from normal user behavior, such as 'chrome_inject_script'.
8. If clicking a button or link fails, read the element's hyperlink and navigate to that URL instead."""

SPOKEN_OUTPUT_STYLE = """TTS-FRIENDLY OUTPUT GUIDELINES - Your final responses will be converted to speech:
1. Write natural, conversational language as if speaking directly to someone.
2. NEVER use markdown formatting (no **, __, ##, bullets).
3. NEVER use labels with colons such as "Result: something".
4. NEVER use numbered or bulleted lists; say "first", "second", "also", "and finally" instead.
5. Avoid parentheses; say "which is" or "meaning that".
6. Spell out symbols: "user at domain dot com", "ten percent", "five plus three equals eight".
7. Weave recommendations naturally into your sentences.
8. End by asking the user what they would like to do next, with a suggestion or two.

GOOD EXAMPLE:
"I found three options for you. First, there's an Italian restaurant nearby with great reviews. Second, a new sushi place just opened. And finally, there's a cozy cafe with excellent pastries. Which one would you like to hear more about?"

BAD EXAMPLE:
"Here are the results:
1. **Italian Restaurant** - Great reviews (4.5/5)
2. **Sushi Place** - Newly opened"
"""


class PromptBuilder:
    """Builds the system instruction installed at the start of a session.

    Usage:
        prompt_builder = PromptBuilder()

        system_prompt = prompt_builder.build(
            tools=registry.describe(),
            response_contract=protocol.response_contract(),
        )
    """

    def __init__(
        self,
        base_prompt: str = BASE_PROMPT,
        guardrails: Optional[str] = GUARDRAILS,
        output_style: Optional[str] = SPOKEN_OUTPUT_STYLE,
    ):
        self.base_prompt = base_prompt
        self.guardrails = guardrails
        self.output_style = output_style

    @staticmethod
    def format_tools(tools: list[ToolDefinition]) -> str:
        """One line per tool: '- name: description'."""
        if not tools:
            return "(no tools available)"
        return "\n".join(
            f"- {t.name}: {t.description or 'No description'}" for t in tools
        )

    def build(self, tools: list[ToolDefinition], response_contract: str) -> str:
        """Assemble the system prompt.

        Args:
            tools: Tools available in this session
            response_contract: How the model must encode tool calls and answers

        Returns:
            Complete system prompt
        """
        sections = [
            self.base_prompt,
            f"Available tools:\n{self.format_tools(tools)}",
            response_contract,
        ]
        if self.guardrails:
            sections.append(self.guardrails)
        if self.output_style:
            sections.append(self.output_style)

        prompt = "\n\n".join(s.strip() for s in sections if s and s.strip())
        logger.debug(f"Built system prompt ({len(prompt)} chars, {len(tools)} tools)")
        return prompt

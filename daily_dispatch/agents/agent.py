import json
from typing import Any, AsyncIterator, Dict, List, Optional, Type, TypeVar, Union

import openai
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import LLMServiceError
from .tools import AgentTool

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

STRUCTURED_OUTPUT_PROMPT = """Return the final result as a single JSON object that conforms to this JSON schema.
Do not wrap it in markdown and do not add commentary.

{schema}"""


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


class NewsAgent:
    """Chat-completions agent with a bounded tool-calling loop."""

    def __init__(
        self,
        name: str,
        instructions: str,
        model: str,
        client: openai.AsyncOpenAI,
        tools: Optional[Dict[str, AgentTool]] = None,
        max_steps: int = 6,
        temperature: float = 0.7,
    ):
        self.name = name
        self.instructions = instructions
        self.model = model
        self.client = client
        self.tools = tools or {}
        self.max_steps = max_steps
        self.temperature = temperature

    def _initial_messages(self, prompt: str) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": self.instructions},
            {"role": "user", "content": prompt},
        ]

    def _tool_specs(self) -> Optional[List[Dict[str, Any]]]:
        if not self.tools:
            return None
        return [tool.to_openai() for tool in self.tools.values()]

    async def _complete(self, messages: List[Dict[str, Any]], use_tools: bool = True, **kwargs):
        params: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": messages,
        }
        tool_specs = self._tool_specs() if use_tools else None
        if tool_specs:
            params["tools"] = tool_specs
        params.update(kwargs)

        try:
            return await self.client.chat.completions.create(**params)
        except openai.AuthenticationError as e:
            raise LLMServiceError(f"OpenAI authentication failed: {e}")
        except openai.RateLimitError as e:
            raise LLMServiceError(f"OpenAI rate limit exceeded: {e}")
        except openai.OpenAIError as e:
            raise LLMServiceError(f"OpenAI generation failed: {e}")

    async def _call_tool(self, name: str, raw_arguments: str) -> Dict[str, Any]:
        tool = self.tools.get(name)
        if tool is None:
            return {"error": f"Unknown tool: {name}"}

        try:
            arguments = json.loads(raw_arguments or "{}")
            output = await tool.invoke(arguments)
        except (ValueError, PydanticValidationError) as e:
            logger.warning("agent_tool_bad_arguments", agent=self.name, tool=name, error=str(e))
            return {"error": f"Invalid arguments for {name}: {e}"}

        logger.info("agent_tool_called", agent=self.name, tool=name)
        return output

    async def _append_tool_results(self, messages: List[Dict[str, Any]], content: Optional[str], tool_calls: List[Dict[str, Any]]):
        messages.append({"role": "assistant", "content": content, "tool_calls": tool_calls})
        for call in tool_calls:
            output = await self._call_tool(call["function"]["name"], call["function"]["arguments"])
            messages.append({
                "role": "tool",
                "tool_call_id": call["id"],
                "content": json.dumps(output),
            })

    async def _run(self, messages: List[Dict[str, Any]]) -> str:
        for _ in range(self.max_steps):
            response = await self._complete(messages)
            message = response.choices[0].message

            if not message.tool_calls:
                return message.content or ""

            tool_calls = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.function.name, "arguments": call.function.arguments},
                }
                for call in message.tool_calls
            ]
            await self._append_tool_results(messages, message.content, tool_calls)

        logger.warning("agent_max_steps_reached", agent=self.name, max_steps=self.max_steps)
        response = await self._complete(messages, use_tools=False)
        return response.choices[0].message.content or ""

    async def generate(self, prompt: str, response_model: Optional[Type[M]] = None) -> Union[str, M]:
        """Run the agent; with ``response_model`` the final answer is a validated object."""
        messages = self._initial_messages(prompt)
        text = await self._run(messages)
        logger.info("agent_generation_completed", agent=self.name, model=self.model, response_length=len(text))

        if response_model is None:
            return text

        messages.append({"role": "assistant", "content": text})
        schema = json.dumps(response_model.model_json_schema(by_alias=True))
        messages.append({"role": "user", "content": STRUCTURED_OUTPUT_PROMPT.format(schema=schema)})

        response = await self._complete(messages, use_tools=False, response_format={"type": "json_object"})
        raw = response.choices[0].message.content or ""

        try:
            return response_model.model_validate_json(strip_code_fences(raw))
        except PydanticValidationError as e:
            logger.error("agent_structured_output_invalid", agent=self.name, error=str(e))
            raise LLMServiceError(f"{self.name} returned output that does not match {response_model.__name__}")

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield answer text as it arrives; tool rounds are resolved in between."""
        messages = self._initial_messages(prompt)

        for step in range(self.max_steps + 1):
            use_tools = step < self.max_steps
            stream = await self._complete(messages, use_tools=use_tools, stream=True)

            content_parts: List[str] = []
            pending: Dict[int, Dict[str, Any]] = {}

            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta.content:
                    content_parts.append(delta.content)
                    yield delta.content
                for fragment in delta.tool_calls or []:
                    call = pending.setdefault(fragment.index, {
                        "id": "",
                        "type": "function",
                        "function": {"name": "", "arguments": ""},
                    })
                    if fragment.id:
                        call["id"] = fragment.id
                    if fragment.function and fragment.function.name:
                        call["function"]["name"] += fragment.function.name
                    if fragment.function and fragment.function.arguments:
                        call["function"]["arguments"] += fragment.function.arguments

            if not pending:
                return

            tool_calls = [pending[index] for index in sorted(pending)]
            await self._append_tool_results(messages, "".join(content_parts) or None, tool_calls)

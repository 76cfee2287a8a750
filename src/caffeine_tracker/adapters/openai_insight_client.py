"""OpenAI Responses API client for insight generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from caffeine_tracker.services.insights import InsightClient


@dataclass
class OpenAIInsightClient(InsightClient):
    """Insight client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIInsightClient":
        """Create an OpenAI insight client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        """Call OpenAI Responses API, with structured outputs when a schema is set."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "store": store,
        }
        if schema is not None:
            request_payload["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "weekly_analysis",
                    "strict": True,
                    "schema": schema,
                }
            }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

"""Google Gemini LLM provider."""

from google import genai

from analyst_chat.services.llm.base import (
    BaseLLMProvider,
    FieldReply,
    PartsReply,
    ProviderReply,
    ReplyPart,
)


class GeminiProvider(BaseLLMProvider):
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate(self, prompt: str) -> ProviderReply:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )

        if response.candidates and response.candidates[0].content and response.candidates[0].content.parts:
            parts = []
            for part in response.candidates[0].content.parts:
                if part.text is not None and not part.thought:
                    parts.append(ReplyPart(type="text", text=part.text))
                elif part.function_call:
                    parts.append(ReplyPart(type="function_call"))
                else:
                    parts.append(ReplyPart(type="other"))
            return PartsReply(parts=parts)

        return FieldReply(fields={"text": response.text})

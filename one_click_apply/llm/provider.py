"""Completion providers - language model access behind one method"""

from abc import ABC, abstractmethod

from openai import OpenAI


class CompletionProvider(ABC):
    """complete(prompt) -> raw text. No streaming."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        ...


class OpenAICompletionProvider(CompletionProvider):
    """Chat-completions backed provider. The client is injectable for tests."""

    def __init__(self, api_key=None, model="gpt-4o-mini", temperature=0.5, client=None):
        self.model = model
        self.temperature = temperature
        self.client = client or OpenAI(api_key=api_key)

    def complete(self, prompt):
        resp = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        content = resp.choices[0].message.content
        return (content or "").strip()

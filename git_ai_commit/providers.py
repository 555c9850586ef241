"""Text-generation providers.

Each backend turns the same two prompts into plain text using its own SDK.
Prompt construction and post-processing live in :class:`LLMProvider`;
subclasses only implement :meth:`LLMProvider._complete`.
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union

import anthropic
from google import genai
from google.genai import types
from openai import OpenAI

from .config import Provider
from .errors import ProviderError
from .utils import GitChanges

LOG = logging.getLogger(__name__)

BRANCH_DIFF_MAX_LINES = 300
COMMIT_DIFF_MAX_LINES = 500
BRANCH_NAME_MAX_LENGTH = 50
TRUNCATION_MARKER = "\n\n... (diff truncated)"
FALLBACK_COMMIT_MESSAGE = "chore: update code"

BRANCH_PROMPT_TEMPLATE = """Based on the following git changes, generate a concise, descriptive branch name in kebab-case format.

Git Status:
{status}

Git Diff (truncated):
{diff}

Rules:
- Use lowercase kebab-case (e.g., feature-add-user-auth)
- Maximum 50 characters
- Be specific and descriptive
- Use conventional prefixes: feature-, fix-, refactor-, docs-, test-, chore-
- Respond with ONLY the branch name, nothing else

Branch name:"""

COMMIT_PROMPT_TEMPLATE = """Based on the following staged git changes, generate a concise conventional commit message.

Staged Changes:
{diff}

Rules:
- Follow conventional commit format: type: description
- Types: feat, fix, refactor, docs, test, chore, style, perf
- Keep the subject line under 72 characters
- Be specific and descriptive
- Respond with ONLY the commit message, nothing else

Commit message:"""

_INVALID_BRANCH_CHARS = re.compile(r"[^a-z0-9\-/]")
_REPEATED_DASHES = re.compile(r"-+")


def truncate_diff(diff: str, max_lines: int = COMMIT_DIFF_MAX_LINES) -> str:
    """Keep the first ``max_lines`` lines of a diff, marking the cut."""
    lines = diff.split("\n")
    if len(lines) <= max_lines:
        return diff
    return "\n".join(lines[:max_lines]) + TRUNCATION_MARKER


def clean_branch_name(name: str) -> str:
    """Force provider output into a valid, lowercase kebab-case branch name."""
    name = _INVALID_BRANCH_CHARS.sub("-", name.lower())
    name = _REPEATED_DASHES.sub("-", name)
    # The cut can land right after a dash.
    return name.strip("-")[:BRANCH_NAME_MAX_LENGTH].rstrip("-")


def build_branch_prompt(changes: GitChanges) -> str:
    return BRANCH_PROMPT_TEMPLATE.format(
        status=changes.status,
        diff=truncate_diff(changes.diff, BRANCH_DIFF_MAX_LINES),
    )


def build_commit_prompt(staged_diff: str) -> str:
    return COMMIT_PROMPT_TEMPLATE.format(diff=truncate_diff(staged_diff, COMMIT_DIFF_MAX_LINES))


class LLMProvider(ABC):
    """Generates branch names and commit messages from git changes."""

    name: str = ""
    model: str = ""
    branch_max_tokens = 50
    commit_max_tokens = 100

    @abstractmethod
    def _complete(self, prompt: str, max_tokens: int) -> str:
        """Send a single-turn prompt and return the raw response text."""

    def generate_branch_name(self, changes: GitChanges) -> str:
        raw = self._complete(build_branch_prompt(changes), self.branch_max_tokens)
        LOG.debug("%s raw branch name: %r", self.name, raw)
        return clean_branch_name(raw.strip())

    def generate_commit_message(self, staged_diff: str) -> str:
        raw = self._complete(build_commit_prompt(staged_diff), self.commit_max_tokens)
        LOG.debug("%s raw commit message: %r", self.name, raw)
        return raw.strip() or FALLBACK_COMMIT_MESSAGE


class OpenAIProvider(LLMProvider):
    name = "openai"
    model = "gpt-4o-mini"
    temperature = 0.7

    def __init__(self, api_key: str, client: Any = None) -> None:
        if client is None:
            client = OpenAI(api_key=api_key)
        self.client = client

    def _complete(self, prompt: str, max_tokens: int) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    name = "anthropic"
    model = "claude-3-5-haiku-20241022"

    def __init__(self, api_key: str, client: Any = None) -> None:
        if client is None:
            client = anthropic.Anthropic(api_key=api_key)
        self.client = client

    def _complete(self, prompt: str, max_tokens: int) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        # Only the first content block is used, and only if it is text.
        if not response.content or response.content[0].type != "text":
            return ""
        return response.content[0].text


class GeminiProvider(LLMProvider):
    name = "gemini"
    model = "gemini-2.0-flash"

    def __init__(self, api_key: str, client: Any = None) -> None:
        if client is None:
            client = genai.Client(api_key=api_key)
        self.client = client

    def _complete(self, prompt: str, max_tokens: int) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(max_output_tokens=max_tokens),
        )
        return response.text or ""


PROVIDER_CLASSES = {
    Provider.OPENAI: OpenAIProvider,
    Provider.ANTHROPIC: AnthropicProvider,
    Provider.GEMINI: GeminiProvider,
}

PROVIDER_ENV_VARS = {
    Provider.OPENAI: ("OPENAI_API_KEY",),
    Provider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
    Provider.GEMINI: ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def get_api_key(provider: Provider, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read the provider's credential from the environment.

    Raises:
        ProviderError: If none of the provider's variables is set.
    """
    environ = os.environ if environ is None else environ
    names = PROVIDER_ENV_VARS[provider]
    for name in names:
        value = environ.get(name)
        if value:
            return value
    raise ProviderError(f"{' or '.join(names)} environment variable is not set")


def create_provider(provider: Union[Provider, str],
                    environ: Optional[Mapping[str, str]] = None) -> LLMProvider:
    """Construct the backend for ``provider`` with its credential.

    Raises:
        ProviderError: For an unknown provider or a missing credential.
    """
    try:
        provider = Provider(provider)
    except ValueError:
        raise ProviderError(f"Unknown provider: {provider}") from None

    api_key = get_api_key(provider, environ)
    LOG.debug("Creating %s provider", provider.value)
    return PROVIDER_CLASSES[provider](api_key)

"""
git-ai-commit: AI-named branches and commit messages for your git changes

Key Features:
    - Inspects staged and unstaged changes in the current repository
    - Asks OpenAI, Anthropic or Google Gemini for a branch name and a
      conventional commit message
    - Creates the branch, stages everything, commits and pushes to origin
    - Dry-run mode previews every command without touching the repository
    - Project-local and user-global JSON configuration

Usage:
    Run inside a git repository with changes:
    $ git-ai-commit --provider anthropic --dry-run
"""

__version__ = "1.0.1"

from .config import CLIOptions, Config, ConfigManager, Provider
from .git import GitOperations
from .providers import LLMProvider, create_provider
from .utils import GitChanges
from .workflow import GitAICommit

__all__ = [
    'CLIOptions',
    'Config',
    'ConfigManager',
    'GitAICommit',
    'GitChanges',
    'GitOperations',
    'LLMProvider',
    'Provider',
    'create_provider',
    '__version__',
]

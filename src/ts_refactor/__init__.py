"""TS Refactor Agent.

Walks a legacy JavaScript project and migrates each file to TypeScript
through a chat-completion model, with rate-limit backoff and a fallback
model for files the primary model cannot handle.
"""

__version__ = "1.0.0"

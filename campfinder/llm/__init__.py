"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send JSON-mode chat completions and decode the reply.
"""

"""
OpenAI LLM provider implementation.

Contains:
    - create_openai_client: Create an OpenAI SDK client instance
    - normalize_messages_for_openai: Reduce messages to the chat format
    - openai_chat: Chat completion returning raw text
"""

from openai import OpenAI


def create_openai_client(api_key: str, base_url: str | None = None) -> OpenAI:
    """
    Create an OpenAI SDK client instance.

    Args:
        api_key: OpenAI API key
        base_url: Optional custom base URL for compatible APIs

    Returns:
        Configured OpenAI client instance
    """
    return OpenAI(api_key=api_key or None, base_url=base_url)


def normalize_messages_for_openai(messages: list) -> list:
    """Keep only system/user/assistant messages with string content."""
    norm = []
    for m in messages:
        role = m.get("role")
        if role not in ("system", "user", "assistant"):
            continue
        norm.append({"role": role, "content": m.get("content") or ""})
    return norm


def openai_chat(
    client: OpenAI,
    model: str,
    messages: list,
    temperature: float,
    max_tokens: int,
    timeout: float,
    json_mode: bool = False,
) -> str:
    """
    Perform OpenAI chat completion.

    Args:
        client: OpenAI SDK client instance
        model: Model name to use
        messages: List of role-tagged message dicts
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
        json_mode: Ask the API for a JSON object response

    Returns:
        Generated text response
    """
    kwargs = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    resp = client.chat.completions.create(
        model=model,
        messages=normalize_messages_for_openai(messages),
        max_tokens=max_tokens,
        temperature=temperature,
        timeout=timeout,
        **kwargs,
    )
    return (resp.choices[0].message.content or "").strip()

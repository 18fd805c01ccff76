"""
Prompt construction for the simulation, evaluation and synthesis steps.

Everything here is pure string building. Role instructions are rebuilt
identically for every turn and are never persisted.
"""

from typing import Sequence

from .records import Client, ConversationMessage, Scenario, SimulationRun


CUSTOMER_TEMPERATURE = 0.8
AGENT_TEMPERATURE = 0.7
EVALUATION_TEMPERATURE = 0.3
SYNTHESIS_TEMPERATURE = 0.3

FEEDBACK_SEPARATOR = "\n" + "=" * 80 + "\n"

EVALUATOR_SYSTEM_PROMPT = "You are a JSON-only response bot. Always output valid JSON."

SYNTHESIZER_SYSTEM_PROMPT = (
    "You are an expert prompt engineer specialising in customer support agents. "
    "You rewrite system prompts so they fix the weaknesses found in test conversations "
    "while keeping what already works, and you respect target lengths precisely. "
    "Output ONLY a raw JSON object starting with { and ending with }. "
    "Do not use markdown code blocks and do not add text before or after the JSON."
)


def build_customer_prompt(scenario: Scenario) -> str:
    return f"""You are simulating a real customer in a customer support conversation.
Behave according to this scenario:
- Scenario name: {scenario.name}
- Type: {scenario.type}
- Description: {scenario.description}
- Persona: {scenario.customer_persona}
- Goal: {scenario.goal}

Instructions:
- Speak as the customer only. Never write the agent's messages.
- Keep your mood and style consistent with the persona.
- React realistically to the agent's previous message.
- Keep each message to 1-3 sentences.
- Stop escalating once your goal is clearly achieved.
- Sound natural and human."""


def build_agent_prompt(client: Client) -> str:
    return f"""You are the AI support agent for this client.

CLIENT DETAILS:
- Name: {client.name}
- Industry: {client.industry}
- Description: {client.description}
- Products/services: {client.products_or_services}
- Policies: {client.policies}
- Tone of voice: {client.tone_of_voice}
- Extra context: {client.extra_context}

BASE SYSTEM PROMPT (follow strictly):
{client.base_system_prompt}

General rules:
- Respond helpfully, accurately and within the client's policies.
- Stay within the client's tone and style.
- If information is missing, ask a clarifying question or say you don't know.
- Never invent policies or guarantees that were not provided.
- Keep responses concise and professional."""


def format_transcript(conversation: Sequence[ConversationMessage], separator: str = "\n") -> str:
    return separator.join(
        f"{'Customer' if msg.role == 'customer' else 'Agent'}: {msg.content}"
        for msg in conversation
    )


def build_customer_turn_instruction(
    turn: int, total_turns: int, conversation: Sequence[ConversationMessage]
) -> str:
    if turn == 1:
        return (
            f"This is turn 1 of {total_turns}. Start the conversation naturally as the "
            "customer described in the scenario. Introduce your issue or question."
        )
    return (
        f"This is turn {turn} of {total_turns}.\n\n"
        f"Conversation so far:\n{format_transcript(conversation)}\n\n"
        "Respond naturally as the customer. React to the agent's last message."
    )


def build_evaluation_prompt(
    client: Client, scenario: Scenario, conversation: Sequence[ConversationMessage]
) -> str:
    return f"""You are an expert evaluator of customer support chat quality.
Rate how well the AI agent handled the conversation below.

CLIENT DETAILS:
- Name: {client.name}
- Industry: {client.industry}
- Description: {client.description}
- Products/services: {client.products_or_services}
- Policies: {client.policies}
- Tone of voice: {client.tone_of_voice}
- Base system prompt: {client.base_system_prompt}

SCENARIO DETAILS:
- Name: {scenario.name}
- Type: {scenario.type}
- Description: {scenario.description}
- Customer persona: {scenario.customer_persona}
- Goal: {scenario.goal}

CONVERSATION:
{format_transcript(conversation, separator=chr(10) * 2)}

Evaluate:
1. Goal achievement: did the agent accomplish the scenario's goal?
2. Tone & style: did the agent follow the required tone and stay professional?
3. Policy compliance: did the agent respect the client's stated policies?
4. Helpfulness & clarity: were the responses clear, concise and helpful?
5. Safety & risk: did the agent avoid unsafe promises or misleading information?

Output JSON ONLY in this format:
{{
  "score": <number between 0 and 100>,
  "evaluationSummary": "<2-3 sentence summary>",
  "detailedFeedback": "<multi-paragraph explanation>",
  "promptImprovementSuggestions": [
    "<short suggestion 1>",
    "<short suggestion 2>"
  ]
}}"""


def render_feedback_block(run: SimulationRun, scenario: Scenario | None) -> str:
    """Render one run and its scenario as evidence for the synthesizer."""
    suggestions = run.prompt_improvement_suggestions
    bullets = (
        "\n".join(f"- {s}" for s in suggestions)
        if suggestions
        else "- No specific suggestions provided"
    )
    return f"""
SCENARIO: {scenario.name if scenario else 'Unknown'} ({scenario.type if scenario else 'N/A'})
Description: {(scenario.description if scenario else '') or 'N/A'}
Customer Persona: {(scenario.customer_persona if scenario else '') or 'N/A'}
Goal: {(scenario.goal if scenario else '') or 'N/A'}

TEST RESULTS:
- Score: {run.score or 0}/100
- Summary: {run.evaluation_summary or 'No summary available'}

DETAILED FEEDBACK:
{run.detailed_feedback or 'No detailed feedback available'}

SPECIFIC IMPROVEMENT SUGGESTIONS:
{bullets}
"""


def build_synthesis_prompt(client: Client, feedback_summary: str, base_word_count: int) -> str:
    return f"""Rewrite the support agent system prompt below into an improved version that fixes every weakness surfaced by the scenario tests.

HARD CONSTRAINT ON LENGTH:
- The improved prompt MUST be approximately {base_word_count} words, within ±5% of the original {base_word_count} words.
- Balance depth against this budget: cut repetition before cutting guidance.

CLIENT DETAILS:
- Name: {client.name}
- Industry: {client.industry or 'Not specified'}
- Description: {client.description or 'Not provided'}
- Products/Services: {client.products_or_services or 'Not specified'}
- Policies: {client.policies or 'Not specified'}
- Tone of Voice: {client.tone_of_voice or 'Not specified'}
- Extra Context: {client.extra_context or 'Not provided'}

ORIGINAL BASE SYSTEM PROMPT ({base_word_count} words):
{client.base_system_prompt}

SCENARIO TEST RESULTS & FEEDBACK:
{feedback_summary}

YOUR TASKS:
1. Analyse every piece of feedback and find the patterns that repeat across scenarios.
2. Keep every effective element of the original prompt.
3. Replace weak or ambiguous instructions with specific, actionable guidance.
4. Cover the edge cases the tests exposed: escalation, missing information, policy limits, emotional customers.
5. Stay faithful to the client's policies and tone; never add guarantees the client did not state.
6. Organise the prompt into clear sections that read naturally.
7. Write a detailed rationale explaining what changed, which feedback drove each change, and the expected effect.

OUTPUT REQUIREMENT:
Output ONLY valid JSON with no markdown, no code blocks and no text outside the object, in exactly this shape:
{{
  "combinedPrompt": "<the improved system prompt, approximately {base_word_count} words>",
  "rationale": "<detailed explanation of the changes and why they were made>"
}}"""

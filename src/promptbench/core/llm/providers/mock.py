"""
Mock LLM provider for offline testing and development.

Contains:
    - _MockModel: Deterministic local stub for testing

The mock recognises which role it is playing from the system prompt and
produces a plausible reply for it: a customer line, an agent line, an
evaluation JSON object, or a synthesis JSON object that restates the
base prompt it was given.
"""

import json
import re


class _MockModel:
    """
    Deterministic local stub for offline testing.

    Tracks calls per role so consecutive turns are distinguishable.
    """

    def __init__(self):
        self.calls = {}

    def chat(self, messages):
        """
        Generate a mock response for the role implied by the system prompt.

        Args:
            messages: List of message dicts with role/content

        Returns:
            Response text
        """
        sys_text = next((m["content"] for m in messages if m["role"] == "system"), "")
        user_text = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        sys_lower = sys_text.lower()

        if "simulating a real customer" in sys_lower:
            role = "customer"
        elif "json-only" in sys_lower:
            role = "evaluator"
        elif "prompt engineer" in sys_lower:
            role = "synthesizer"
        else:
            role = "agent"
        self.calls[role] = self.calls.get(role, 0) + 1
        call_n = self.calls[role]

        if role == "customer":
            m = re.search(r"Goal:\s*(.+)", sys_text)
            goal = m.group(1).strip() if m else "get some help"
            if call_n == 1:
                return f"Hi, I need help. I want to {goal}."
            return f"Thanks. Can you confirm the next step? (message {call_n})"

        if role == "agent":
            return f"Thank you for reaching out. I'm happy to help with that. (reply {call_n})"

        if role == "evaluator":
            return json.dumps(
                {
                    "score": 75,
                    "evaluationSummary": "The agent handled the request politely and stayed on policy.",
                    "detailedFeedback": "Responses were concise and accurate. The agent could confirm resolution more explicitly.",
                    "promptImprovementSuggestions": [
                        "Ask the agent to confirm the customer's goal before closing.",
                        "Remind the agent to summarise the next steps.",
                    ],
                }
            )

        m = re.search(
            r"ORIGINAL BASE SYSTEM PROMPT[^\n]*\n(.*?)\n\s*SCENARIO TEST RESULTS",
            user_text,
            re.DOTALL,
        )
        base = m.group(1).strip() if m else "You are a helpful, accurate and policy-compliant support agent."
        return json.dumps(
            {
                "combinedPrompt": base,
                "rationale": "Kept the structure of the base prompt and tightened the instructions flagged in feedback.",
            }
        )

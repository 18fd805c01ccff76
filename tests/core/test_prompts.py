"""Tests for role instruction and synthesis prompt builders."""

from promptbench.core.prompts import (
    build_agent_prompt,
    build_customer_prompt,
    build_customer_turn_instruction,
    build_synthesis_prompt,
    format_transcript,
    render_feedback_block,
)
from promptbench.core.records import Client, ConversationMessage, Scenario, SimulationRun


def _client(**overrides):
    data = {
        "id": "c1",
        "name": "Acme Telecom",
        "industry": "Telecommunications",
        "policies": "No refunds after 30 days.",
        "tone_of_voice": "Warm",
        "base_system_prompt": "You are Acme's support agent.",
    }
    data.update(overrides)
    return Client.model_validate(data)


def _scenario(**overrides):
    data = {
        "id": "s1",
        "client_id": "c1",
        "name": "Angry refund",
        "type": "complaint",
        "customer_persona": "Frustrated long-time customer",
        "goal": "get a refund for a double charge",
    }
    data.update(overrides)
    return Scenario.model_validate(data)


def test_customer_prompt_embeds_scenario():
    prompt = build_customer_prompt(_scenario())
    assert "simulating a real customer" in prompt
    assert "Angry refund" in prompt
    assert "Frustrated long-time customer" in prompt
    assert "get a refund for a double charge" in prompt


def test_agent_prompt_embeds_base_prompt_verbatim():
    prompt = build_agent_prompt(_client())
    assert "You are Acme's support agent." in prompt
    assert "No refunds after 30 days." in prompt
    assert "Warm" in prompt


def test_prompts_are_deterministic():
    assert build_customer_prompt(_scenario()) == build_customer_prompt(_scenario())
    assert build_agent_prompt(_client()) == build_agent_prompt(_client())


def test_first_turn_instruction_starts_conversation():
    text = build_customer_turn_instruction(1, 4, [])
    assert "turn 1 of 4" in text
    assert "Start the conversation" in text


def test_later_turn_instruction_includes_transcript():
    conversation = [
        ConversationMessage(role="customer", content="I was charged twice.", turn=1),
        ConversationMessage(role="agent", content="Sorry to hear that.", turn=1),
    ]
    text = build_customer_turn_instruction(2, 4, conversation)
    assert "Customer: I was charged twice.\nAgent: Sorry to hear that." in text
    assert "React to the agent's last message" in text


def test_format_transcript_separator():
    conversation = [
        ConversationMessage(role="customer", content="a", turn=1),
        ConversationMessage(role="agent", content="b", turn=1),
    ]
    assert format_transcript(conversation, separator="\n\n") == "Customer: a\n\nAgent: b"


def test_feedback_block_defaults():
    run = SimulationRun.model_validate({"id": "r1", "scenario_id": "s1", "score": 70})
    block = render_feedback_block(run, None)
    assert "SCENARIO: Unknown (N/A)" in block
    assert "- Score: 70/100" in block
    assert "- No specific suggestions provided" in block


def test_feedback_block_lists_suggestions():
    run = SimulationRun.model_validate(
        {"id": "r1", "scenario_id": "s1", "prompt_improvement_suggestions": ["Be briefer", "Confirm refunds"]}
    )
    block = render_feedback_block(run, _scenario())
    assert "SCENARIO: Angry refund (complaint)" in block
    assert "- Be briefer\n- Confirm refunds" in block


def test_synthesis_prompt_states_length_target():
    prompt = build_synthesis_prompt(_client(), "FEEDBACK", 120)
    assert "ORIGINAL BASE SYSTEM PROMPT (120 words):\nYou are Acme's support agent." in prompt
    assert "±5%" in prompt
    assert "SCENARIO TEST RESULTS & FEEDBACK:\nFEEDBACK" in prompt
    assert '"combinedPrompt"' in prompt

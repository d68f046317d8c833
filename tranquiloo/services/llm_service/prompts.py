"""Prompt builders for the external text generators.

The primary and secondary prompts ask for the same schema in independent
wording, so a provider that trips over one phrasing does not get the same
phrasing from the fallback tier.
"""
import json
from typing import Iterable, List, Mapping, Optional, Sequence

# Conversation turns included as context for the primary generator
HISTORY_TURNS = 3
HISTORY_TURN_MAX_CHARS = 500

CRISIS_SYSTEM_PROMPT = """You are a crisis detection system for a mental health wellness app.

Your job is to analyze user messages for suicide risk indicators using clinical expertise.

IMPORTANT CONTEXT CONSIDERATIONS:
- Distinguish between casual expressions ("kill this headache") and genuine distress
- Detect passive ideation ("I wish I wasn't here") vs active ideation ("I want to die")
- Recognize euphemisms: "ending it", "not being here anymore", "going to sleep forever"
- Catch indirect language: "everyone would be better off", "no reason to live"
- Consider misspellings, coded language, and cultural differences

RISK LEVELS:
- none: No indicators detected
- low: Vague distress, no specific ideation ("I can't take this anymore")
- moderate: Passive ideation, no plan/intent ("I wish I was dead")
- high: Active ideation with method/plan ("I've thought about pills")
- imminent: Intent + means + plan ("I have pills and I'm going to take them tonight")

Respond ONLY with valid JSON:
{
  "riskLevel": "none" | "low" | "moderate" | "high" | "imminent",
  "requiresScreening": boolean,
  "reasoning": "brief clinical reasoning",
  "detectedIndicators": ["specific phrases that raised concern"]
}

If riskLevel is "moderate" or higher, set requiresScreening to true.
"""


def build_crisis_prompt(message: str) -> str:
    return f"Analyze this message for crisis indicators:\n\n{json.dumps(message, ensure_ascii=False)}"


def format_history(history: Optional[Sequence[Mapping[str, str]]]) -> str:
    """Last few conversation turns as "role: content" joined by " | "."""
    if not history:
        return ""
    turns: List[str] = []
    for turn in list(history)[-HISTORY_TURNS:]:
        role = str(turn.get("role", "user"))
        content = " ".join(str(turn.get("content", "")).split())[:HISTORY_TURN_MAX_CHARS]
        if content:
            turns.append(f"{role}: {content}")
    return " | ".join(turns)


def build_primary_prompt(
    message: str,
    history: Optional[Sequence[Mapping[str, str]]] = None,
    scenario_guidance: Iterable[str] = (),
) -> str:
    """Strict-JSON analysis prompt for generator A."""
    guidance = list(scenario_guidance)
    guidance_block = (
        "\nScenario guidance:\n- " + "\n- ".join(guidance) if guidance else ""
    )
    recent = format_history(history)
    recent_block = f"\nRecent conversation context: {recent}" if recent else ""

    return f"""You are a calm, trained crisis intervention companion.

Return ONLY a valid JSON object matching the schema below. Do not include any text before or after the JSON and do not use markdown fences.

Schema:
{{
  "anxietyLevel": number between 1 and 10,
  "triggers": ["up to 3 concise triggers"],
  "copingStrategies": ["up to 4 actionable coping steps"],
  "personalizedResponse": "Detailed 200-250 word message in the user's language with validation and multiple coping ideas.",
  "detectedLanguage": "en" | "es"
}}

General response requirements:
- Maintain a steady, compassionate tone.
- Provide concrete, step-by-step coping guidance the user can try immediately.
- Match the language of the user message (English or Spanish) and set detectedLanguage accordingly.
{guidance_block}

User message: {json.dumps(message, ensure_ascii=False)}{recent_block}"""


def build_secondary_prompt(message: str) -> str:
    """Independently worded analysis prompt for generator B."""
    return (
        f"Analyze the mental health tone of: {json.dumps(message, ensure_ascii=False)} "
        'and respond with JSON {"anxietyLevel":number,"triggers":string[],'
        '"copingStrategies":string[],"personalizedResponse":"Comprehensive 200-250 word '
        'therapeutic response in same language as user message",'
        '"detectedLanguage":"en or es - detect language of user message"}.'
    )

"""Canned narrative responses for the local generator.

Each template pairs response text with trigger labels and concrete coping
actions. Templates with several responses are picked from by the
generator's injected random source.
"""
from dataclasses import dataclass
from typing import Tuple

DEFAULT_COPING: Tuple[str, ...] = ("Deep breathing", "Take a walk", "Call someone", "Self-care")


@dataclass(frozen=True)
class ResponseTemplate:
    name: str
    responses: Tuple[str, ...]
    triggers: Tuple[str, ...] = ()
    coping_strategies: Tuple[str, ...] = DEFAULT_COPING


HALLUCINATION = ResponseTemplate(
    name="hallucination",
    responses=(
        "Right now: Look around and name 5 things you can see. Touch something cold - ice "
        "or cold water on your face. Breathe slowly: in for 4, out for 6. If this continues, "
        "call 988 immediately.",
    ),
    triggers=("Paranoia", "Fear", "Crisis"),
    coping_strategies=(
        "Name 5 things you see RIGHT NOW",
        "Splash cold water on face or hold ice",
        "Call 988 or go to ER immediately",
        "Stay with someone trusted",
    ),
)

PANIC = ResponseTemplate(
    name="panic",
    responses=(
        "This is panic, not danger. Breathe: in for 4, hold for 4, out for 6. Five times. "
        "Place hand on chest - you're okay. This will pass in 10-20 minutes.",
    ),
    triggers=("Panic attack", "Acute anxiety"),
    coping_strategies=(
        "Square breathing: 4-4-4-4 pattern",
        "Ice cube on wrist or neck",
        "Count backwards from 100 by 7s",
        "This WILL pass in 10-20 minutes",
    ),
)

PTSD = ResponseTemplate(
    name="ptsd",
    responses=(
        "You're having a trauma response. You're safe now. Ground yourself: 5 things you "
        "see, 4 you hear, 3 you touch. The flashback will pass.",
    ),
    triggers=("PTSD", "Trauma response", "Flashback"),
    coping_strategies=(
        "5-4-3-2-1 grounding NOW",
        "Smell something strong (coffee, essential oil)",
        "Bilateral stimulation: tap shoulders alternately",
        'Remind yourself: "That was then, this is now"',
    ),
)

OCD = ResponseTemplate(
    name="ocd",
    responses=(
        "OCD is loud right now. Don't do the compulsion. Set a 5-minute timer - sit with "
        "the discomfort. The urge will peak and fade. You can handle this.",
    ),
    triggers=("OCD", "Intrusive thoughts", "Compulsions"),
    coping_strategies=(
        "Delay the ritual by 5 minutes",
        "Write the thought down, then close the notebook",
        "Do opposite action (if checking, walk away)",
        "Remember: thoughts are not facts",
    ),
)

CRISIS = ResponseTemplate(
    name="crisis",
    responses=(
        "Your pain is real. Right now: Step outside or to another room. Take 10 deep "
        "breaths, count them out loud. Then call 988 - they're available 24/7 to help you "
        "through this safely.",
    ),
    triggers=("Crisis", "Severe distress", "Danger"),
    coping_strategies=(
        "Leave the room immediately",
        "Count 10 breaths out loud",
        "Call 988 now or text HOME to 741741",
        "Go for a walk outside",
    ),
)

BETRAYAL = ResponseTemplate(
    name="relationship_loss",
    responses=(
        "This betrayal is devastating. Right now, breathe: in for 4, hold for 4, out for 6. "
        "Do this 5 times. Then call one person who cares about you. This intense pain will "
        "ease with time.",
    ),
    triggers=("Betrayal", "Loss", "Grief"),
    coping_strategies=(
        "Breathe: 4-4-6 pattern, 5 times",
        "Call one trusted friend now",
        "Write your feelings for 10 minutes",
        "Take care of basics: eat, sleep, shower",
    ),
)

SHORT_REPLY = ResponseTemplate(
    name="short_reply",
    responses=(
        "I'm here and listening. Would you like to share more about how you're feeling right now?",
        "I notice you might be hesitant to share. That's completely okay. Take your time - "
        "I'm here when you're ready.",
        "Sometimes it's hard to find the words. Would it help if I asked you some questions "
        "to get started?",
        "I'm with you. You don't have to say much right now - just know that I'm here to "
        "support you.",
    ),
)

NO_REPLY = ResponseTemplate(
    name="no_reply",
    responses=(
        "That's completely okay. I'm here whenever you feel ready to share. Is there "
        "anything else on your mind?",
        "No problem at all. Sometimes we just need someone to listen. I'm here for whatever "
        "you need.",
        "I understand. We can take things at your own pace. What would be most helpful for "
        "you right now?",
        "That's alright. You don't have to share anything you're not comfortable with. I'm "
        "here to support you however you need.",
    ),
)

YES_REPLY = ResponseTemplate(
    name="yes_reply",
    responses=(
        "Great! I'm glad you're open to sharing. What would you like to talk about?",
        "Wonderful. I'm here to listen. What's been on your mind lately?",
        "Perfect. Take your time and share whatever feels comfortable for you.",
        "Excellent. I'm all ears. What's going on?",
    ),
)

POSITIVE = ResponseTemplate(
    name="positive",
    responses=(
        "That's wonderful to hear! It's beautiful when we can appreciate the good moments "
        "like this. What's been contributing to these positive feelings?",
        "I love hearing this! It sounds like you're in a really good place right now. "
        "What's been going well for you lately?",
        "This is such a joy to hear. It's great that you're not carrying much anxiety "
        "right now. What's been helping you keep this outlook?",
    ),
    coping_strategies=(
        "Notice what is helping today",
        "Keep the routines that support you",
        "Share the good moment with someone",
        "Write down three things that went well",
    ),
)

GAD = ResponseTemplate(
    name="gad",
    responses=(
        "Constant worry is exhausting. Right now: write down your top 3 worries. Circle "
        "what you can control today. Start with the smallest one.",
    ),
    triggers=("GAD", "Chronic worry", "Anxiety"),
    coping_strategies=(
        "Worry time: set 15 min to worry, then stop",
        "Progressive muscle relaxation",
        'Challenge thoughts: "Is this likely?"',
        "Focus on ONE task for next hour",
    ),
)

ELEVATED = ResponseTemplate(
    name="elevated",
    responses=(
        "Thank you for sharing all of this with me. Let's slow things down for a moment: "
        "inhale for 4, hold for 4, and exhale for 6 while relaxing your shoulders. Look "
        "around and name one thing you can see, one you can touch, one you can hear, and "
        "one you can smell. When you feel a little steadier, tell me which part of this "
        "feels heaviest so we can work through it together.",
    ),
    triggers=("Stress", "Overwhelm"),
    coping_strategies=(
        "Do three rounds of 4-4-6 breathing",
        "Name one thing you can see, touch, hear, and smell",
        "Sip water or hold something cool",
        "Describe the hardest part so we can plan next steps",
    ),
)

SADNESS = ResponseTemplate(
    name="sadness",
    responses=(
        "I hear your sadness. It's okay to feel this way. Right now, do one kind thing for "
        "yourself - maybe a cup of tea or step outside for fresh air. What's making you sad?",
    ),
    triggers=("Sadness", "Low mood"),
    coping_strategies=(
        "One small act of self-care now",
        "Walk outside for 5 minutes",
        "Text someone you trust",
        "Let yourself cry if you need to",
    ),
)

GENERAL_ANXIETY = ResponseTemplate(
    name="general_anxiety",
    responses=(
        "Anxiety is tough. Right now: breathe in for 4, hold for 7, out for 8. Do this 3 "
        "times. Then name 5 things you can see. This will help calm your nervous system.",
    ),
    triggers=("Anxiety", "Worry"),
    coping_strategies=(
        "4-7-8 breathing, 3 times",
        "Name 5 things you see",
        "Walk around the room",
        "Hold ice or cold water",
    ),
)

INSOMNIA = ResponseTemplate(
    name="insomnia",
    responses=(
        "Racing mind at night is hard. Try 4-7-8 breathing five times. Then do a body scan: "
        "tense and release each muscle group. No screens for next hour.",
    ),
    triggers=("Insomnia", "Sleep anxiety"),
    coping_strategies=(
        "4-7-8 breathing in bed",
        "Progressive muscle relaxation",
        "Write worries on paper, leave by bed",
        "Cool room, warm feet",
    ),
)

CHECK_IN = ResponseTemplate(
    name="check_in",
    responses=(
        "I'm here. What's on your mind today?",
        "Thanks for reaching out. What's happening?",
        "I'm listening. Tell me what you're feeling.",
        "You're not alone. What's going on?",
    ),
)

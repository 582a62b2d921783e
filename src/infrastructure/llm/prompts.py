"""
infrastructure.llm.prompts - Prompt text and context formatting.

Literal braces in the JSON examples are doubled because the text and
chat prompts are rendered through ChatPromptTemplate.
"""

from __future__ import annotations

from domain.entities import ChatMessage, Entry
from domain.models import MoodAnalysis


def _entry_date(entry: Entry) -> str:
    return entry.created_at[:10] if entry.created_at else "unknown date"


def format_entry_context(entries: list[Entry], heading: str, empty: str) -> str:
    """Numbered ``date: "caption" - description`` lines, newest first."""
    if not entries:
        return empty
    lines = [
        f'{i}. {_entry_date(e)}: "{e.caption}" - {e.detailed_mood_description}'
        for i, e in enumerate(entries, start=1)
    ]
    return f"{heading} (last {len(entries)} posts):\n" + "\n".join(lines)


def format_tags(tags: list[str]) -> str:
    if not tags:
        return "No specific mood tags selected"
    return "User-selected mood tags: " + ", ".join(tags)


def format_conversation(history: list[ChatMessage]) -> str:
    if not history:
        return "No previous conversation."
    return "\n".join(
        f"{'User' if m.role == 'user' else 'Assistant'}: {m.content}"
        for m in history
    )


def format_analysis(analysis: MoodAnalysis, caption: str) -> str:
    scores = ", ".join(
        f"{name.capitalize()}: {value}/10"
        for name, value in analysis.traits.to_dict().items()
    )
    return (
        f'Current mood context: "{caption}" - {analysis.detailed_mood_description}\n'
        f"Mental health traits: {scores}\n"
        f"Overall mood: {analysis.overall_mood.value}"
    )


# ---------------------------------------------------------------------------
# Mood analysis (vision), rendered with str.format
# ---------------------------------------------------------------------------

MOOD_ANALYSIS_PROMPT = """Look at this image and its caption and judge the user's mood and mental health traits.

Current post:
Caption: "{caption}"
{tags}

{context}

Provide:
1. A detailed mood description of 4-5 sentences addressed to the user as "you". Be personal and consider how this moment fits their emotional journey.
2. A brief mood description of two short sentences, also using "you".
3. Mental health trait scores on a 0-10 integer scale for: anxiety, depression, stress, happiness, energy, confidence.
4. One overall mood category: very_happy, happy, neutral, sad, very_sad.

Relate the current mood to the recent posts. Look for patterns, improvements or changes.

Example descriptions:
- "You appear to be in a positive state of mind today. Your energy seems high and you're radiating confidence."
- "You seem to be carrying some stress. There's a sense of tension in your current mood."

Respond with JSON only:
{{
  "detailedMoodDescription": "4-5 sentences using 'you'",
  "moodDescription": "two short sentences using 'you'",
  "mentalHealthTraits": {{
    "anxiety": 0, "depression": 0, "stress": 0,
    "happiness": 0, "energy": 0, "confidence": 0
  }},
  "overallMood": "very_happy|happy|neutral|sad|very_sad"
}}"""


# ---------------------------------------------------------------------------
# Suggestions (text)
# ---------------------------------------------------------------------------

SUGGESTION_SYSTEM = (
    "You recommend activities, movies, songs and food that support a "
    "person's mental well-being. You always answer with a single JSON object."
)

ENTRY_SUGGESTIONS_PROMPT = """Based on the user's current mood and mental health state, give short, actionable suggestions to help their well-being.

{analysis}

Give exactly 3 SHORT suggestions per category, each under four words:
1. Activities (physical, creative or social)
2. Movies (films that match or could lift their mood)
3. Songs (music for their current emotional state)
4. Food (meals or snacks that support mental health)

Examples: "Take a walk", "Inside Out", "Here Comes the Sun", "Green tea".

Respond in JSON:
{{
  "activities": ["...", "...", "..."],
  "movies": ["...", "...", "..."],
  "songs": ["...", "...", "..."],
  "food": ["...", "...", "..."]
}}"""

CONTEXT_SUGGESTIONS_PROMPT = """Based on the user's recent mood journey, give therapeutic suggestions that could genuinely improve their well-being.

{context}

Give exactly 3 suggestions per category. Each one is 2-3 lines: what it is and why it could help.
1. Activities (therapeutic, physical, creative or social)
2. Movies (films offering comfort, inspiration or emotional healing)
3. Songs (music that uplifts, comforts or helps process emotions)
4. Food (meals or snacks that support mood and mental health)

Consider the patterns in their recent entries.

Example: "Listen to 'Here Comes the Sun' by The Beatles. The gentle melody and hopeful lyrics can remind you that difficult times are temporary."

Respond in JSON:
{{
  "activities": ["...", "...", "..."],
  "movies": ["...", "...", "..."],
  "songs": ["...", "...", "..."],
  "food": ["...", "...", "..."]
}}"""


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

CHAT_SYSTEM = """You are a supportive mental health assistant. You can see the user's recent mood journal entries and your recent conversation with them.

Reply in a way that:
1. Acknowledges their situation or question
2. Offers practical advice, encouragement or insight
3. Refers to their recent mood patterns when relevant
4. Keeps a warm, empathetic tone
5. Suggests activities or coping strategies when appropriate
6. Stays conversational, at most 3-4 sentences

The user tracks their mental health through mood journaling. Be supportive and understanding."""

CHAT_USER = (
    "{entries}\n\n"
    "Recent conversation:\n{conversation}\n\n"
    "User's current message: \"{message}\""
)

"""Prompts for presentation generation and audio transcription.

These are the contract with the model. The JSON schema in
PRESENTATION_PROMPT must stay in sync with what llm/parser.py and
llm/validators.py accept:

  {
    "title": str,
    "oneLiner": str,
    "language": str,
    "structure": [{"section": str, "content": str}, ...]   (>= 3 entries)
  }

We ask for 5-7 sections so that a slightly lazy answer still clears the
3-section minimum.


## Transcription

The transcription instruction asks for the bare transcript and a fixed
sentinel when nothing intelligible was said. The sentinel is what lets us
tell "the speaker said nothing" apart from "the call returned nothing".
"""

PRESENTATION_PROMPT = """You are an expert presentation creator. Create a professional, engaging presentation from the following content.

STRICT REQUIREMENTS:
1. Respond in the SAME LANGUAGE as the input text
2. Create {min_sections_hint} well-structured sections
3. Use relevant emojis for visual appeal
4. Make content presentation-ready
5. Return ONLY valid JSON in this exact format:

{{
  "title": "🎯 [Professional title with emoji]",
  "oneLiner": "✨ [Compelling summary]",
  "language": "[detected language code]",
  "structure": [
    {{
      "section": "📋 [Section name with emoji]",
      "content": "[Detailed content with bullet points and emojis]"
    }}
  ]
}}

INPUT TEXT: "{source_text}"

Respond with valid JSON only:"""

NO_SPEECH_SENTINEL = "TRANSCRIPTION_FAILED"

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this audio accurately. Return only the clean transcribed text "
    "without any formatting, commentary, or additional text. If the audio is "
    f"unclear or empty, return '{NO_SPEECH_SENTINEL}'."
)


def build_presentation_prompt(source_text: str, min_sections: int = 3) -> str:
    """Fill the presentation prompt for one (already trimmed) source text."""
    low = max(5, min_sections)
    return PRESENTATION_PROMPT.format(
        min_sections_hint=f"{low}-{low + 2}",
        source_text=source_text,
    )

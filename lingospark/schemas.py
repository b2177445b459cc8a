"""
Structured output schema and prompt templates for the OpenAI calls.

The analysis call is constrained with ``ANALYSIS_RESPONSE_SCHEMA`` (strict
JSON schema mode), so the model must return exactly these four fields. The
client still validates the payload before building a result.
"""

ANALYSIS_RESPONSE_SCHEMA = {
    "name": "word_analysis",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "definition": {"type": "string"},
            "examples": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "target": {"type": "string"},
                        "native": {"type": "string"},
                    },
                    "required": ["target", "native"],
                    "additionalProperties": False,
                },
            },
            "usageNotes": {"type": "string"},
            "imagePrompt": {"type": "string"},
        },
        "required": ["definition", "examples", "usageNotes", "imagePrompt"],
        "additionalProperties": False,
    },
}

EXPECTED_EXAMPLE_COUNT = 2

ANALYSIS_PROMPT = """
Analyze the following text: "{text}".
Target Language: {target_lang}
User's Native Language: {native_lang}

Provide a JSON response with the following fields:
1. "definition": A natural language explanation in {native_lang}.
2. "examples": An array of 2 objects, each with "target" (sentence in {target_lang}) and "native" (translation in {native_lang}).
3. "usageNotes": A fun, witty, conversational paragraph in {native_lang} explaining the culture, context, tone, synonyms, or common confusion. Write like a friend, not a textbook. Be concise but interesting.
4. "imagePrompt": A short English description of a visual concept that represents this text, suitable for generating an illustration.
"""

IMAGE_PROMPT_TEMPLATE = (
    "A colorful, fun, flat vector illustration of: {prompt}. Minimalist, vibrant style."
)

CHAT_SYSTEM_INSTRUCTION = (
    "You are a helpful language learning assistant. The user is asking about a "
    "specific word or phrase provided in the context. Answer in {native_lang}. "
    "Keep answers concise, encouraging, and helpful."
)

CHAT_CONTEXT_TEMPLATE = "Word: {word}. Definition: {definition}. Usage: {usage}"

CHAT_ACKNOWLEDGEMENT = "Understood. I am ready to answer questions about this word."

STORY_PROMPT = """
Create a short, funny, and coherent story using the following words: {word_list}.
Write the story in the target language of the words, then provide a translation in {native_lang}.
Highlight the used words in the text if possible (e.g., using **bold**).
"""

STORYTELLER_SYSTEM_PROMPT = "You are a creative storyteller."

CONTINUATION_SYSTEM_PROMPT = "You are a creative AI that helps continue a bedtime story for a child."


STORY_PROMPT_TEMPLATE = (
    "Create a bedtime story in the {genre} genre, featuring a {child_gender} aged {age} "
    "with a theme of {theme}. Illustrate it in {art_style} style."
)


CONTINUATION_PROMPT_TEMPLATE = """{previous_story}

The user input is: "{user_input}".

Please continue the story based on the user's input. {directive}"""

DECISION_DIRECTIVE = "End the current segment with a sentence prompting the reader to make a decision."

CONCLUSION_DIRECTIVE = "Conclude the story in a dramatic conclusion."


CHOICES_PROMPT_TEMPLATE = """Based on the following {label}, generate three relevant choices for the next part of the story. Each choice must be {max_words} tokens or fewer:

{text}"""


IMAGE_STYLE_DIRECTIVE = (
    "Create an illustration suitable for a children's story. The image should be in a "
    "consistent art style, with no text, no captions, no subtitles, no words, no letters, "
    "no numbers, no symbols, no writing. Ensure the illustration is high quality."
)

IMAGE_PROMPT_TEMPLATE = "{directive} This image is for segment {segment_number} of the story. {description}"


def build_story_prompt(req) -> str:
    return STORY_PROMPT_TEMPLATE.format(
        genre=req.genre,
        child_gender=req.child_gender,
        age=req.age,
        theme=req.theme,
        art_style=req.art_style,
    )

def build_continuation_prompt(req, concluding: bool) -> str:
    return CONTINUATION_PROMPT_TEMPLATE.format(
        previous_story=req.previous_story,
        user_input=req.user_input,
        directive=CONCLUSION_DIRECTIVE if concluding else DECISION_DIRECTIVE,
    )

def build_choices_prompt(text: str, label: str, max_words: int) -> str:
    return CHOICES_PROMPT_TEMPLATE.format(label=label, max_words=max_words, text=text)

def build_image_prompt(description: str, segment_index: int) -> str:
    # Segment numbers shown to the model are 1-based
    return IMAGE_PROMPT_TEMPLATE.format(
        directive=IMAGE_STYLE_DIRECTIVE,
        segment_number=segment_index + 1,
        description=description,
    )

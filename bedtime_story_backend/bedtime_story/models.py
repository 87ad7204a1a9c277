from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

class StoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    genre: str
    child_gender: str = Field(alias="childGender")
    theme: str
    # Free-form ages such as "5-7" go straight into the prompt
    age: Union[int, str]
    art_style: str = Field(alias="artStyle")

class ContinueRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Empty input is forwarded to the model as-is
    user_input: str = Field("", alias="userInput")
    previous_story: str = Field("", alias="previousStory")
    input_count: int = Field(0, ge=0, alias="inputCount")

class SegmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    story: str
    choices: List[str] = Field(default_factory=list)
    image: str
    audio_url: str = Field(alias="audioUrl")

class TranscriptionResponse(BaseModel):
    transcription: str

class SegmentState(BaseModel):
    """State carried through the segment generation graph."""
    segment_index: int
    system_prompt: str
    user_prompt: str
    max_tokens: int
    offer_choices: bool
    choices_label: str = "story"
    story_text: Optional[str] = None
    choices: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    audio_url: Optional[str] = None

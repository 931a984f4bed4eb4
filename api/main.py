import logging
from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from s2m.config import DEFAULT_ASPECT_RATIO, LOG_FORMAT, LOG_LEVEL, MAX_SCENE_COUNT, MIN_SCENE_COUNT
from s2m.core.contracts import Scene
from s2m.services.gemini import generate_image, generate_prompts

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="S2M Story-to-Media API",
    description="API for turning stories into cinematic image prompts and rendering them.",
    version="1.0.0",
)

# Pydantic model for a scene already present in the storyboard
class ScenePromptModel(BaseModel):
    scene_number: int
    prompt: str

# Pydantic model for the prompt generation request body
class PromptsRequest(BaseModel):
    story: str
    scene_count: int = Field(ge=MIN_SCENE_COUNT, le=MAX_SCENE_COUNT)
    existing_scenes: List[ScenePromptModel] = Field(default_factory=list)

class PromptsResponse(BaseModel):
    scenes: List[ScenePromptModel]
    thumbnail_prompt: str

class ImageRequest(BaseModel):
    prompt: str
    aspect_ratio: str = DEFAULT_ASPECT_RATIO

class ImageResponse(BaseModel):
    image_url: str

@app.post("/prompts", response_model=PromptsResponse, summary="Generate scene prompts", response_description="Scene prompts and a thumbnail prompt")
def prompts(request: PromptsRequest):
    """
    Accepts a story and the number of NEW scenes wanted, plus any scenes that
    already exist so the model can continue from them.
    """
    if not request.story.strip():
        raise HTTPException(status_code=400, detail="Story must not be empty.")

    # Existing scenes only need number and prompt; ids are a UI concern.
    existing = [
        Scene(id=f"existing-{s.scene_number}", scene_number=s.scene_number, prompt=s.prompt)
        for s in request.existing_scenes
    ]

    try:
        batch = generate_prompts(request.story, request.scene_count, existing)
    except Exception as e:
        logger.exception("Prompt generation failed")
        raise HTTPException(status_code=502, detail=f"Prompt generation failed: {str(e)}")

    return batch.to_dict()

@app.post("/images", response_model=ImageResponse, summary="Render an image", response_description="The rendered image as a data URL")
def images(request: ImageRequest):
    """
    Renders a single prompt. The image is returned inline as a base64 ``data:`` URL.
    """
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty.")

    try:
        image_url = generate_image(request.prompt, request.aspect_ratio)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Image generation failed")
        raise HTTPException(status_code=502, detail=f"Image generation failed: {str(e)}")

    return {"image_url": image_url}

@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    """
    Checks the health of the API.
    """
    return {"status": "ok"}

# To run this API:
# uvicorn api.main:app --reload --port 8000
# Then point the UI at it with S2M_API_URL=http://127.0.0.1:8000

import os
import base64
import logging
from google import genai
from google.genai import types
from dotenv import load_dotenv

from studio_errors import GenerationFailed, EditFailed, MissingApiKeyError

load_dotenv()

logger = logging.getLogger(__name__)

GEMINI_API_KEY = os.getenv("GEMINI_KEY") or os.getenv("API_KEY")

GENERATE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "imagen-4.0-generate-001")
EDIT_MODEL = os.getenv("GEMINI_EDIT_MODEL", "gemini-2.5-flash-image")

# Output encodings of the two endpoints
GENERATE_MIME_TYPE = "image/jpeg"
EDIT_MIME_TYPE = "image/png"

ASPECT_RATIOS = {
    "Square (1:1)": "1:1",
    "Landscape (16:9)": "16:9",
    "Portrait (9:16)": "9:16",
    "Standard (4:3)": "4:3",
    "Tall (3:4)": "3:4",
}

GENERATE_ERROR_MESSAGE = "Failed to generate image. Please check the prompt or try again later."
EDIT_ERROR_MESSAGE = "Failed to edit image. Please check your instructions or try again later."


class ImageServiceClient:
    """
    Stateless wrapper around the two remote image calls.

    Args:
        api_key: Gemini API key, defaults to GEMINI_KEY / API_KEY from the environment
        client: Pre-built genai.Client (or anything shaped like one)
    """

    def __init__(self, api_key=None, client=None):
        if client is None:
            api_key = api_key or GEMINI_API_KEY
            if not api_key:
                logger.error("GEMINI_KEY environment variable is not set")
                raise MissingApiKeyError("GEMINI_KEY environment variable is not set")
            client = genai.Client(api_key=api_key)
        self.client = client

    def generate_image(self, prompt: str, aspect_ratio: str) -> str:
        """
        Generate one image from a text prompt.

        Returns:
            str: base64 encoded JPEG bytes of the first generated image
        """
        try:
            logger.info(f"Generating image (model: {GENERATE_MODEL}, aspect: {aspect_ratio})...")
            response = self.client.models.generate_images(
                model=GENERATE_MODEL,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=GENERATE_MIME_TYPE,
                    aspect_ratio=aspect_ratio,
                ),
            )

            if response.generated_images:
                image_bytes = response.generated_images[0].image.image_bytes
                if image_bytes:
                    logger.info(f"✓ Image generated ({len(image_bytes)} bytes)")
                    return base64.b64encode(image_bytes).decode("utf-8")

            raise GenerationFailed("No image was generated. The response might have been blocked.")

        except Exception as e:
            logger.error(f"Error generating image: {e}")
            raise GenerationFailed(GENERATE_ERROR_MESSAGE) from e

    def edit_image(self, instruction: str, image_base64: str, mime_type: str) -> str:
        """
        Edit an existing image with a natural-language instruction.

        Args:
            instruction: The editing instruction
            image_base64: base64 encoded source image
            mime_type: MIME type of the source image (e.g. image/png)

        Returns:
            str: base64 encoded PNG bytes of the edited image
        """
        try:
            logger.info(f"Editing image (model: {EDIT_MODEL}, source: {mime_type})...")
            response = self.client.models.generate_content(
                model=EDIT_MODEL,
                contents=[
                    types.Part.from_bytes(data=base64.b64decode(image_base64), mime_type=mime_type),
                    instruction,
                ],
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE"],
                ),
            )

            for part in response.candidates[0].content.parts:
                if part.inline_data is not None and part.inline_data.data:
                    logger.info(f"✓ Edited image received ({len(part.inline_data.data)} bytes)")
                    return base64.b64encode(part.inline_data.data).decode("utf-8")

            raise EditFailed("No edited image was returned. The response might have been blocked.")

        except Exception as e:
            logger.error(f"Error editing image: {e}")
            raise EditFailed(EDIT_ERROR_MESSAGE) from e

"""List Gemini models available to the configured API key."""

from google import genai

from app.config import get_settings


def main() -> int:
    """Print models that support content generation."""
    settings = get_settings()
    if not settings.gemini_api_key:
        print("GEMINI_API_KEY is not set.")
        return 1

    client = genai.Client(api_key=settings.gemini_api_key)
    print("Available models:")
    for model in client.models.list():
        if "generateContent" in (model.supported_actions or []):
            print(f"- {model.name}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

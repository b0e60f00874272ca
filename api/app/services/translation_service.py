from app.core.config import settings
from app.core.exceptions import ValidationError, ExternalServiceError
import requests
import logging

logger = logging.getLogger(__name__)


class TranslationService:
    """Service for translation suggestions using the DeepL API."""

    # Mapping from our ISO-2 codes to DeepL target codes where they differ
    LANGUAGE_CODE_MAPPING = {
        'en': 'EN-GB',
        'pt': 'PT-PT',
    }

    def __init__(self):
        """Initialize the translation service."""
        self.api_key = settings.deepl_api_key
        self.base_url = settings.deepl_api_url
        if not self.api_key:
            logger.warning("DeepL API key not configured. Translation suggestions will fail.")

    def _map_language_code(self, lang_code: str) -> str:
        """
        Map an ISO-2 language code to a DeepL target language code.

        Args:
            lang_code: ISO-2 code (e.g., 'it')

        Returns:
            DeepL target code (e.g., 'IT')
        """
        return self.LANGUAGE_CODE_MAPPING.get(lang_code.lower(), lang_code.upper())

    def suggest_translation(self, text: str, target_language: str) -> str:
        """
        Suggest a translation of text into the target language.

        Args:
            text: Text to translate
            target_language: Target ISO-2 code (e.g., 'en', 'it')

        Returns:
            Translated text

        Raises:
            ValidationError: If text or target language is missing
            ExternalServiceError: If the key is missing, the request fails or times out,
                                  or the response has an unexpected format
        """
        if not text or not text.strip() or not target_language or not target_language.strip():
            raise ValidationError("Missing required parameters")

        # Re-check API key from settings in case it was loaded after initialization
        if not self.api_key:
            self.api_key = settings.deepl_api_key
        if not self.api_key:
            raise ExternalServiceError("DeepL API key not configured")

        target = self._map_language_code(target_language.strip())
        logger.debug(f"Translation request: '{text}' to '{target}'")

        try:
            response = requests.post(
                self.base_url,
                json={"text": [text], "target_lang": target},
                headers={
                    "Authorization": f"DeepL-Auth-Key {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=settings.external_request_timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            error_msg = f"Translation API request failed: {str(e)}"
            if getattr(e, 'response', None) is not None:
                error_msg += f" - Status: {e.response.status_code}"
            logger.error(error_msg)
            raise ExternalServiceError(error_msg) from e
        except ValueError as e:
            logger.error(f"Translation API returned invalid JSON: {str(e)}")
            raise ExternalServiceError("Translation API returned invalid JSON") from e

        translations = data.get("translations") if isinstance(data, dict) else None
        if (not isinstance(translations, list) or not translations
                or not isinstance(translations[0], dict) or "text" not in translations[0]):
            logger.error(f"Unexpected translation API response format: {data}")
            raise ExternalServiceError("Unexpected translation API response format")

        translated_text = translations[0]["text"]
        logger.info(f"Translated '{text}' to {target}: '{translated_text}'")
        return translated_text


# Create a singleton instance
translation_service = TranslationService()

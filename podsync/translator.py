"""Handles text translation using Hugging Face models."""

import logging
import torch
from transformers import AutoTokenizer, AutoModelForSeq2SeqLM
from typing import List

from .exceptions import TranslationError
from .base import Translator

logger = logging.getLogger(__name__)

class HuggingFaceTranslator(Translator):
    """Implements translation using Hugging Face Transformers models."""

    def __init__(self, model_name: str = "Helsinki-NLP/opus-mt-ar-en", device: str = "cuda", max_length: int = 512):
        """
        Initializes the HuggingFaceTranslator.

        Args:
            model_name: The name of the Hugging Face translation model.
            device: The device to run the model on ("cuda" or "cpu").
            max_length: Token limit for each input text.

        Raises:
            ValueError: If the specified device is invalid or unavailable.
            TranslationError: If the model or tokenizer fails to load.
        """
        self.model_name = model_name
        self.device = device
        self.max_length = max_length

        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available for translation. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
            raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")

        logger.info(f"Initializing HuggingFaceTranslator with model '{self.model_name}' on device '{self.device}'")
        try:
            self.tokenizer = AutoTokenizer.from_pretrained(self.model_name)
            self.model = AutoModelForSeq2SeqLM.from_pretrained(self.model_name)
            self.model.to(self.device)
            self.model.eval()
            logger.info(f"Hugging Face translation model '{self.model_name}' loaded successfully.")
        except Exception as e:
            logger.error(f"Failed to load translation model or tokenizer '{self.model_name}': {e}", exc_info=True)
            raise TranslationError(f"Failed to load translation model/tokenizer '{self.model_name}': {e}") from e

    def translate(self, text: str) -> str:
        if not text:
            return ""
        return self.translate_batch([text])[0]

    def translate_batch(self, texts: List[str]) -> List[str]:
        # Empty strings confuse the model; translate only the non-empty ones
        positions = [i for i, text in enumerate(texts) if text and text.strip()]
        results = [""] * len(texts)
        if not positions:
            return results

        logger.debug(f"Translating batch of {len(positions)} text(s), first: '{texts[positions[0]][:50]}...'")
        try:
            inputs = self.tokenizer(
                [texts[i] for i in positions],
                return_tensors="pt",
                padding=True,
                truncation=True,
                max_length=self.max_length,
            )
            inputs = {k: v.to(self.device) for k, v in inputs.items()}
            with torch.no_grad():
                translated_tokens = self.model.generate(**inputs)
            decoded = self.tokenizer.batch_decode(translated_tokens, skip_special_tokens=True)
        except Exception as e:
            logger.error(f"Error during batch translation: {e}", exc_info=True)
            raise TranslationError(f"Hugging Face translation failed: {e}") from e

        for i, translated in zip(positions, decoded):
            results[i] = translated.strip()
        return results

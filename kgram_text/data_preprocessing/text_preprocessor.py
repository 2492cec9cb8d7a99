"""
Text Preprocessor Module

Prepares a raw corpus for a FrequencyModel. The model counts characters over
a fixed alphabet (character codes ``0 .. alphabet_size - 1``), so any other
character has to be mapped into the alphabet or removed before the model is
built.

Only character-level cleaning lives here. Whitespace, case and punctuation are
left untouched because they are part of the statistics the model learns.
"""

import unicodedata


class TextPreprocessor:
    def __init__(self, alphabet_size=128):
        """
        Initializes the TextPreprocessor for a model alphabet.

        Args:
            alphabet_size (int): Number of character codes the model accepts
                (default is 128, i.e. ASCII).
        """
        self.alphabet_size = alphabet_size

    def handle_missing_data(self, text):
        """Handles missing data by replacing None with an empty string."""
        return text if text else ""

    def normalize(self, text):
        """Normalizes text by removing accents and converting to ASCII."""
        return (
            unicodedata.normalize("NFKD", text)
            .encode("ascii", "ignore")
            .decode("utf-8", "ignore")
        )

    def fit_to_alphabet(self, text):
        """
        Maps text into the model alphabet.

        For an ASCII alphabet, accented letters are decomposed first so their
        base letter survives ("café" becomes "cafe"). Wider alphabets keep
        composed characters. Any character whose code is still outside the
        alphabet is dropped.

        Args:
            text (str or None): The raw corpus.

        Returns:
            str: Text containing only characters of the alphabet.
        """
        text = self.handle_missing_data(text)
        if self.alphabet_size <= 128:
            text = self.normalize(text)
        else:
            text = unicodedata.normalize("NFC", text)
        return "".join(ch for ch in text if ord(ch) < self.alphabet_size)

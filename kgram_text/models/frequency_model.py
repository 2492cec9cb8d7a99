"""
Frequency Model

A k-th order character Markov model of a text. The model records, for every
kgram (substring of length ``order``) of the text, how often it occurs and
how often each alphabet character immediately follows it. The text is read
as circular, so the last ``order`` positions wrap around into the start of
the text and every one of the ``len(text)`` positions yields exactly one
(kgram, successor) observation.

Example:
    >>> model = FrequencyModel("banana", 2)
    >>> model.frequency("na")
    2
    >>> model.frequency("na", "b")
    1

The model is built once in the constructor and is read-only afterwards, so a
built model can be shared between threads. Sampling takes an optional
``numpy.random.Generator``; see ``weighted_sampler`` for the threading rules
of generators.
"""

import time
import logging

import numpy as np

from kgram_text.models import weighted_sampler

# Size of the ASCII alphabet
ASCII_ALPHABET_SIZE = 128


class KgramRecord:
    """
    Statistics of one kgram: its total count and the successor-count vector.

    Keeping both in one record means the total always matches the sum of the
    vector.
    """

    __slots__ = ("total", "successor_counts")

    def __init__(self, alphabet_size):
        self.total = 0
        self.successor_counts = np.zeros(alphabet_size, dtype=np.int64)

    def observe(self, code):
        self.total += 1
        self.successor_counts[code] += 1

    def freeze(self):
        self.successor_counts.flags.writeable = False


class FrequencyModel:
    """
    A k-th order Markov model of a text over a fixed character alphabet.
    """

    def __init__(self, text, order, alphabet_size=ASCII_ALPHABET_SIZE, logger=None):
        """
        Builds the model from ``text`` in a single pass.

        Args:
            text (str): The corpus. Must be longer than ``order``.
            order (int): Length of the kgram context, at least 1.
            alphabet_size (int): Number of character codes the model counts
                over (128 for ASCII).
            logger (logging.Logger, optional): Logger for build metrics.

        Raises:
            ValueError: If ``order`` is not an int in ``1 .. len(text) - 1``,
                ``alphabet_size`` is not positive, or the text holds a
                character outside the alphabet.
        """
        self.logger = logger or logging.getLogger(__name__)

        if not isinstance(order, int) or isinstance(order, bool):
            raise ValueError(f"order must be an int, got {type(order).__name__}")
        if order < 1:
            raise ValueError(f"order must be at least 1, got {order}")
        if not isinstance(text, str):
            raise ValueError(f"text must be a str, got {type(text).__name__}")
        if order >= len(text):
            raise ValueError(
                f"order ({order}) must be smaller than the text length ({len(text)})")
        if not isinstance(alphabet_size, int) or alphabet_size < 1:
            raise ValueError(f"alphabet_size must be a positive int, got {alphabet_size!r}")

        self._order = order
        self._alphabet_size = alphabet_size
        self._records = {}

        start_time = time.time()
        self._build(text)

        self.logger.info("FrequencyModel built", extra={
            "metrics": {
                "order": order,
                "alphabet_size": alphabet_size,
                "text_length": len(text),
                "distinct_kgrams": len(self._records),
                "build_time": time.time() - start_time
            }
        })

    def _build(self, text):
        """Counts one (kgram, successor) observation per position of the circular text."""
        codes = [self._code_of(ch, position) for position, ch in enumerate(text)]
        n = len(text)
        order = self._order

        for i in range(n):
            key = _circular_slice(text, i, order)
            successor = codes[(i + order) % n]

            record = self._records.get(key)
            if record is None:
                record = KgramRecord(self._alphabet_size)
                self._records[key] = record
            record.observe(successor)

        for record in self._records.values():
            record.freeze()

    def _code_of(self, ch, position):
        code = ord(ch)
        if code >= self._alphabet_size:
            raise ValueError(
                f"character {ch!r} at position {position} is outside the "
                f"alphabet of size {self._alphabet_size}")
        return code

    @property
    def order(self):
        """The fixed kgram length k."""
        return self._order

    @property
    def alphabet_size(self):
        return self._alphabet_size

    def _check_kgram(self, kgram):
        if not isinstance(kgram, str) or len(kgram) != self._order:
            raise ValueError(
                f"kgram has wrong length: expected {self._order}, got {kgram!r}")

    def _check_symbol(self, c):
        if not isinstance(c, str) or len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        code = ord(c)
        if code >= self._alphabet_size:
            raise ValueError(
                f"character {c!r} is outside the alphabet of size {self._alphabet_size}")
        return code

    def frequency(self, kgram, c=None):
        """
        Counts occurrences of a kgram, or of a character following it.

        Args:
            kgram (str): A string of exactly ``order`` characters.
            c (str, optional): A single character of the alphabet.

        Returns:
            int: With ``c`` omitted, how many times ``kgram`` occurs in the
            circular text. With ``c``, how many times ``c`` immediately
            follows ``kgram``. Both are 0 for a kgram that never occurs.

        Raises:
            ValueError: If ``kgram`` has the wrong length or ``c`` is not a
                character of the alphabet.
        """
        self._check_kgram(kgram)
        code = self._check_symbol(c) if c is not None else None

        record = self._records.get(kgram)
        if record is None:
            return 0
        if code is None:
            return record.total
        return int(record.successor_counts[code])

    def sample(self, kgram, rng=None):
        """
        Draws a character that follows ``kgram``, weighted by how often it
        followed ``kgram`` in the text.

        Args:
            kgram (str): A kgram observed in the text.
            rng (numpy.random.Generator, optional): Source of randomness.

        Returns:
            str: The drawn character.

        Raises:
            ValueError: If ``kgram`` has the wrong length or never occurred.
        """
        self._check_kgram(kgram)
        record = self._records.get(kgram)
        if record is None:
            raise ValueError(f"kgram not found: {kgram!r}")
        return chr(weighted_sampler.sample(record.successor_counts, rng=rng))

    def successor_counts(self, kgram):
        """
        Returns the read-only successor-count vector of an observed kgram,
        indexed by character code.
        """
        self._check_kgram(kgram)
        record = self._records.get(kgram)
        if record is None:
            raise ValueError(f"kgram not found: {kgram!r}")
        return record.successor_counts

    def kgrams(self):
        """Returns the observed kgrams in ascending order."""
        return sorted(self._records)

    def total_observations(self):
        """Returns the number of (kgram, successor) observations, i.e. the text length."""
        return sum(record.total for record in self._records.values())

    def __len__(self):
        return len(self._records)

    def __contains__(self, kgram):
        return kgram in self._records

    def __str__(self):
        """
        Renders one line per kgram, in ascending kgram order: the kgram, then
        every successor character with a non-zero count followed by the count.
        """
        lines = []
        for key in self.kgrams():
            counts = self._records[key].successor_counts
            entries = [f"{chr(code)} {int(counts[code])}" for code in np.flatnonzero(counts)]
            lines.append(f"{key}: " + " ".join(entries))
        return "\n".join(lines)

    def __repr__(self):
        return (f"FrequencyModel(order={self._order}, "
                f"alphabet_size={self._alphabet_size}, kgrams={len(self._records)})")


def _circular_slice(text, start, length):
    """Returns ``length`` characters of ``text`` from ``start``, wrapping past the end."""
    end = start + length
    if end <= len(text):
        return text[start:end]
    return text[start:] + text[:end - len(text)]


def build(text, order, alphabet_size=ASCII_ALPHABET_SIZE, logger=None):
    """Builds a FrequencyModel of ``text`` with the given order."""
    return FrequencyModel(text, order, alphabet_size=alphabet_size, logger=logger)

"""Tranquiloo message-triage pipeline.

Classifies the language of a single user message, scores it against
clinical symptom patterns, gates it through crisis assessment and produces
a structured analysis by cascading across external text generators down to
a deterministic local generator.
"""

__version__ = "0.1.0"
